"""Adaptive distance estimation for planned training blocks.

Evidence tiers, most reliable first:
- PaceTarget: the block prescribes a pace range
- HeartRateTarget: the athlete's own historical pace at similar heart rate
- DurationOnly: a generic recreational pace (6:00/km by default)
- NoEvidence: no duration at all, contributes 0 m

``select_tier`` is a pure decision on the block's fields; only resolving a
HeartRateTarget touches the history store.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Union

from plancore.config import get_settings
from plancore.services.historical_pace import lookup_historical_pace
from plancore.services.history_store import HistoryStoreError, WorkoutHistoryStore
from plancore.services.plan_types import EstimationParams, TrainingBlock
from plancore.validators import coerce_blocks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaceTarget:
    duration_seconds: float
    pace_sec_per_km: float


@dataclass(frozen=True)
class HeartRateTarget:
    duration_seconds: float
    target_hr: float


@dataclass(frozen=True)
class DurationOnly:
    duration_seconds: float


@dataclass(frozen=True)
class NoEvidence:
    pass


Tier = Union[PaceTarget, HeartRateTarget, DurationOnly, NoEvidence]


@dataclass(frozen=True)
class DistanceEstimate:
    """An estimated distance and the tier that produced it."""
    meters: int
    tier: str  # "pace_target" | "heart_rate_history" | "duration_only" | "no_evidence"
    pace_sec_per_km: float | None = None


def _positive(value: float | None) -> float | None:
    """The value when it is a usable finite positive number, else None."""
    if value is None or not math.isfinite(value) or value <= 0:
        return None
    return value


def round_half_up(value: float) -> int:
    """Round half up (2.5 -> 3) rather than to even."""
    return int(math.floor(value + 0.5))


def distance_for_pace(duration_seconds: float, pace_sec_per_km: float) -> int:
    """Meters covered in ``duration_seconds`` at ``pace_sec_per_km``, 0 if that overflows."""
    meters = duration_seconds * 1000 / pace_sec_per_km
    if not math.isfinite(meters):
        return 0
    return round_half_up(meters)


def target_pace(pace_min: float | None, pace_max: float | None) -> float | None:
    """Midpoint of the pace range, or pace_min alone. pace_max alone is not a target."""
    low = _positive(pace_min)
    if low is None:
        return None
    high = _positive(pace_max)
    return (low + high) / 2 if high is not None else low


def target_heart_rate(hr_min: float | None, hr_max: float | None) -> float | None:
    """Midpoint only when both bounds exist, otherwise whichever bound is set."""
    low, high = _positive(hr_min), _positive(hr_max)
    if low is not None and high is not None:
        return (low + high) / 2
    return low if low is not None else high


def select_tier(params: EstimationParams) -> Tier:
    """Pick the most reliable evidence tier the params support."""
    duration = _positive(params.duration_seconds)
    if duration is None:
        return NoEvidence()

    pace = target_pace(params.pace_min, params.pace_max)
    if pace is not None:
        return PaceTarget(duration, pace)

    hr = target_heart_rate(params.hr_min, params.hr_max)
    if hr is not None:
        return HeartRateTarget(duration, hr)

    return DurationOnly(duration)


def explain_distance(store: WorkoutHistoryStore, params: EstimationParams) -> DistanceEstimate:
    """Estimate a block distance and report which tier produced it.

    A heart-rate tier without historical evidence falls through to the
    duration-only pace. HistoryStoreError propagates to the caller.
    """
    tier = select_tier(params)

    if isinstance(tier, PaceTarget):
        return DistanceEstimate(
            distance_for_pace(tier.duration_seconds, tier.pace_sec_per_km), "pace_target", tier.pace_sec_per_km
        )

    if isinstance(tier, HeartRateTarget):
        try:
            pace = lookup_historical_pace(store, params.athlete_id, tier.target_hr)
        except HistoryStoreError:
            logger.warning(
                "history store read failed during distance estimation",
                extra={"ctx_athlete_id": params.athlete_id, "ctx_target_hr": tier.target_hr},
            )
            raise
        if pace is not None:
            return DistanceEstimate(
                distance_for_pace(tier.duration_seconds, pace), "heart_rate_history", pace
            )
        tier = DurationOnly(tier.duration_seconds)

    if isinstance(tier, DurationOnly):
        pace = get_settings().fallback_pace_sec_per_km
        return DistanceEstimate(distance_for_pace(tier.duration_seconds, pace), "duration_only", pace)

    return DistanceEstimate(0, "no_evidence")


def estimate_distance(store: WorkoutHistoryStore, params: EstimationParams) -> int:
    """Predicted distance in whole meters for one training block."""
    estimate = explain_distance(store, params)
    logger.debug(
        "block distance estimated",
        extra={
            "ctx_athlete_id": params.athlete_id,
            "ctx_tier": estimate.tier,
            "ctx_meters": estimate.meters,
        },
    )
    return estimate.meters


def calculate_plan_distance(
    store: WorkoutHistoryStore,
    athlete_id: str,
    blocks: Iterable[TrainingBlock | dict[str, Any]],
) -> int:
    """Total planned distance in meters, repetitions included.

    Explicit block distances are used as-is; other blocks with any hint are
    estimated once and multiplied by their repetitions. Blocks with nothing
    to go on contribute 0.
    """
    total = 0.0
    for block in coerce_blocks(blocks):
        reps = block.effective_repetitions
        if block.has_explicit_distance:
            total += block.distance_meters * reps
        elif block.has_estimation_hints:
            total += estimate_distance(store, EstimationParams.from_block(athlete_id, block)) * reps
    return round_half_up(total)
