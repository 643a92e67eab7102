from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

BLOCK_TYPES = ("WARMUP", "RUN", "INTERVALS", "REST", "COOLDOWN")


@dataclass(frozen=True)
class TrainingBlock:
    """One planned segment of a workout.

    Paces are seconds per kilometer, heart rates beats per minute. A finite positive
    ``distance_meters`` is authoritative and skips estimation entirely.
    """

    duration_seconds: Optional[float] = None
    distance_meters: Optional[float] = None
    hr_min: Optional[float] = None
    hr_max: Optional[float] = None
    pace_min: Optional[float] = None
    pace_max: Optional[float] = None
    repetitions: Optional[int] = None
    block_type: Optional[str] = None
    order: int = 0
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None

    @property
    def effective_repetitions(self) -> int:
        if self.repetitions and self.repetitions > 0:
            return self.repetitions
        return 1

    @property
    def has_explicit_distance(self) -> bool:
        return bool(
            self.distance_meters and math.isfinite(self.distance_meters) and self.distance_meters > 0
        )

    @property
    def has_estimation_hints(self) -> bool:
        return any(
            v for v in (self.duration_seconds, self.hr_min, self.hr_max, self.pace_min, self.pace_max)
        )


@dataclass(frozen=True)
class EstimationParams:
    """Query for a single distance estimate; built per call and discarded."""

    athlete_id: str
    duration_seconds: Optional[float] = None
    hr_min: Optional[float] = None
    hr_max: Optional[float] = None
    pace_min: Optional[float] = None
    pace_max: Optional[float] = None

    @classmethod
    def from_block(cls, athlete_id: str, block: TrainingBlock) -> "EstimationParams":
        return cls(
            athlete_id=athlete_id,
            duration_seconds=block.duration_seconds,
            hr_min=block.hr_min,
            hr_max=block.hr_max,
            pace_min=block.pace_min,
            pace_max=block.pace_max,
        )
