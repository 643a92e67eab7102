"""Historical pace lookup: the athlete's own pace at a similar heart rate."""

from __future__ import annotations

import logging
from statistics import fmean

from plancore.config import get_settings
from plancore.services.history_store import WorkoutHistoryStore, check_sample

logger = logging.getLogger(__name__)


def lookup_historical_pace(
    store: WorkoutHistoryStore,
    athlete_id: str,
    target_hr: float,
    tolerance_bpm: int | None = None,
    limit: int | None = None,
) -> float | None:
    """Mean pace (sec/km) of the athlete's most recent workouts near ``target_hr``.

    Workouts within +/- ``tolerance_bpm`` (inclusive) are considered; only the
    ``limit`` most recent are used and each counts equally. Returns None when
    nothing qualifies. Store failures propagate as HistoryStoreError.
    """
    if not target_hr or target_hr <= 0:
        raise ValueError(f"target_hr must be positive, got {target_hr!r}")

    if tolerance_bpm is None or limit is None:
        settings = get_settings()
        tolerance_bpm = settings.hr_tolerance_bpm if tolerance_bpm is None else tolerance_bpm
        limit = settings.history_sample_limit if limit is None else limit

    workouts = store.query_recent_workouts_near_hr(
        athlete_id, target_hr - tolerance_bpm, target_hr + tolerance_bpm, limit=limit
    )
    if not workouts:
        logger.debug(
            "no historical workouts near target HR",
            extra={"ctx_athlete_id": athlete_id, "ctx_target_hr": target_hr},
        )
        return None

    paces = [check_sample(w).pace_sec_per_km for w in workouts[:limit]]
    return fmean(paces)
