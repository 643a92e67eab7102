"""Athlete history: typical easy/competition pace and race-effort detection.

Compares a current effort with what the athlete usually does so imported
workouts that were really races can be flagged.
"""

from __future__ import annotations

from dataclasses import dataclass
from statistics import fmean

from plancore.config import get_settings
from plancore.services.history_store import WorkoutHistoryStore, check_sample

EASY_LABELS = {"EASY"}
FAST_LABELS = {"INTERVALS", "TEMPO"}

# Competition pace guess when no fast sessions exist: 15% faster than easy
DEFAULT_COMPETITION_RATIO = 0.85
RACE_PACE_RATIO = 0.90
COMPETITION_PACE_MARGIN = 1.05
RACE_HR_RATIO = 1.15


@dataclass(frozen=True)
class AthleteHistoricalStats:
    avg_easy_pace: float         # sec/km
    avg_competition_pace: float  # sec/km
    avg_easy_hr: float           # bpm, 0 when no HR data
    workout_count: int


@dataclass(frozen=True)
class RaceCheck:
    is_race: bool
    reason: str = ""


def get_athlete_historical_stats(
    store: WorkoutHistoryStore, athlete_id: str
) -> AthleteHistoricalStats | None:
    """Summarize the athlete's recent workouts; None when there are too few."""
    settings = get_settings()
    workouts = [check_sample(w) for w in store.query_recent_workouts(athlete_id, limit=settings.stats_sample_limit)]
    if len(workouts) < settings.stats_min_workouts:
        return None

    easy = [w for w in workouts if w.label in EASY_LABELS] or workouts
    fast = [w for w in workouts if w.label in FAST_LABELS]

    avg_easy_pace = fmean(w.pace_sec_per_km for w in easy)
    easy_hrs = [w.avg_heart_rate for w in easy if w.avg_heart_rate]
    avg_easy_hr = fmean(easy_hrs) if easy_hrs else 0.0

    if fast:
        avg_competition_pace = fmean(w.pace_sec_per_km for w in fast)
    else:
        avg_competition_pace = avg_easy_pace * DEFAULT_COMPETITION_RATIO

    return AthleteHistoricalStats(
        avg_easy_pace=avg_easy_pace,
        avg_competition_pace=avg_competition_pace,
        avg_easy_hr=avg_easy_hr,
        workout_count=len(workouts),
    )


def is_race_pace_by_history(current_pace: float, stats: AthleteHistoricalStats) -> RaceCheck:
    """Race if clearly faster than the usual easy pace or close to competition pace."""
    if current_pace < stats.avg_easy_pace * RACE_PACE_RATIO:
        percent_faster = round((1 - current_pace / stats.avg_easy_pace) * 100)
        return RaceCheck(True, f"{percent_faster}% faster than usual")

    if stats.avg_competition_pace > 0 and current_pace <= stats.avg_competition_pace * COMPETITION_PACE_MARGIN:
        return RaceCheck(True, "Race pace")

    return RaceCheck(False)


def is_race_effort(
    current_pace: float, current_hr: float | None, stats: AthleteHistoricalStats
) -> RaceCheck:
    pace_check = is_race_pace_by_history(current_pace, stats)
    if pace_check.is_race:
        return pace_check

    if current_hr and stats.avg_easy_hr > 0 and current_hr > stats.avg_easy_hr * RACE_HR_RATIO:
        percent_higher = round((current_hr / stats.avg_easy_hr - 1) * 100)
        return RaceCheck(True, f"HR {percent_higher}% above usual")

    return RaceCheck(False)
