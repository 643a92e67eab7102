"""Read port for an athlete's completed-workout history.

The estimator never talks to a database directly. It depends on this
interface so tier logic can run against fixture data, while the SQL adapter
in ``plancore.services.sql_store`` serves production reads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


class HistoryStoreError(Exception):
    """The historical-record store could not answer a read."""


class MalformedWorkoutRecord(HistoryStoreError):
    """The store returned a record that violates the eligibility contract."""


@dataclass(frozen=True)
class WorkoutSample:
    """Read-only view of one completed workout."""

    completed_at: datetime
    actual_distance: float  # meters
    actual_duration: float  # seconds
    avg_heart_rate: float | None = None
    label: str | None = None

    @property
    def pace_sec_per_km(self) -> float:
        return self.actual_duration / (self.actual_distance / 1000)


def is_eligible(distance: float | None, duration: float | None) -> bool:
    """A workout is usable evidence only with positive distance and duration."""
    return bool(distance and duration and distance > 0 and duration > 0)


def check_sample(sample: WorkoutSample) -> WorkoutSample:
    """Reject samples that a store should never have returned."""
    if not is_eligible(sample.actual_distance, sample.actual_duration):
        raise MalformedWorkoutRecord(
            f"workout at {sample.completed_at} has no usable distance/duration "
            f"(distance={sample.actual_distance!r}, duration={sample.actual_duration!r})"
        )
    if sample.completed_at is None:
        raise MalformedWorkoutRecord("workout is missing completed_at")
    return sample


class WorkoutHistoryStore(ABC):
    """Interface every historical-record backend must implement."""

    @abstractmethod
    def query_recent_workouts_near_hr(
        self, athlete_id: str, hr_low: float, hr_high: float, limit: int = 10
    ) -> list[WorkoutSample]:
        """Return eligible workouts whose average HR lies in [hr_low, hr_high].

        Only workouts with positive distance and duration qualify. Results are
        ordered by completed_at, most recent first, and capped at ``limit``.
        """

    @abstractmethod
    def query_recent_workouts(self, athlete_id: str, limit: int = 50) -> list[WorkoutSample]:
        """Return the most recent eligible workouts regardless of heart rate."""


class InMemoryHistoryStore(WorkoutHistoryStore):
    """Store backed by plain lists, keyed by athlete id.

    Applies the same filtering, ordering and limit the SQL adapter pushes
    down to the database. Raw records are kept as-is so ineligible rows are
    filtered exactly like a real store would.
    """

    def __init__(self, workouts: dict[str, list[WorkoutSample]] | None = None) -> None:
        self._workouts: dict[str, list[WorkoutSample]] = {
            athlete_id: list(samples) for athlete_id, samples in (workouts or {}).items()
        }
        self.query_count = 0

    def add(self, athlete_id: str, sample: WorkoutSample) -> None:
        self._workouts.setdefault(athlete_id, []).append(sample)

    def _eligible(self, athlete_id: str) -> list[WorkoutSample]:
        rows = [
            w for w in self._workouts.get(athlete_id, [])
            if is_eligible(w.actual_distance, w.actual_duration)
        ]
        return sorted(rows, key=lambda w: w.completed_at, reverse=True)

    def query_recent_workouts_near_hr(
        self, athlete_id: str, hr_low: float, hr_high: float, limit: int = 10
    ) -> list[WorkoutSample]:
        self.query_count += 1
        rows = [
            w for w in self._eligible(athlete_id)
            if w.avg_heart_rate is not None and hr_low <= w.avg_heart_rate <= hr_high
        ]
        return rows[:limit]

    def query_recent_workouts(self, athlete_id: str, limit: int = 50) -> list[WorkoutSample]:
        self.query_count += 1
        return self._eligible(athlete_id)[:limit]
