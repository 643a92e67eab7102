"""Pydantic validation models for block payloads handed over by the plan builder.

Only values that cannot be read as numbers are rejected on the distance path.
Block type and notes are not checked there; PlanBlockInput adds those checks
for full plan submissions. Zero, negative or non-finite paces, durations and
heart rates pass through untouched: the estimator treats them as missing
evidence so plan creation is never blocked by incomplete distance data.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from plancore.services.plan_types import TrainingBlock


class TrainingBlockInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order: Optional[int] = None
    type: Optional[str] = None
    duration_seconds: Optional[float] = Field(default=None, alias="durationSeconds")
    distance_meters: Optional[float] = Field(default=None, alias="distanceMeters")
    repetitions: Optional[int] = None
    rest_seconds: Optional[int] = Field(default=None, alias="restSeconds")
    pace_min: Optional[float] = Field(default=None, alias="paceMin")
    pace_max: Optional[float] = Field(default=None, alias="paceMax")
    hr_min: Optional[float] = Field(default=None, alias="hrMin")
    hr_max: Optional[float] = Field(default=None, alias="hrMax")
    notes: Optional[str] = None

    def to_block(self, index: int = 0) -> TrainingBlock:
        return TrainingBlock(
            duration_seconds=self.duration_seconds,
            distance_meters=self.distance_meters,
            hr_min=self.hr_min,
            hr_max=self.hr_max,
            pace_min=self.pace_min,
            pace_max=self.pace_max,
            repetitions=self.repetitions,
            block_type=self.type,
            order=self.order if self.order is not None else index,
            rest_seconds=self.rest_seconds,
            notes=self.notes,
        )


class PlanBlockInput(TrainingBlockInput):
    """Stricter block shape for plan submissions; the distance path stays lenient."""

    type: Optional[Literal["WARMUP", "RUN", "INTERVALS", "REST", "COOLDOWN"]] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class PlanDistanceInput(BaseModel):
    athlete_id: str = Field(min_length=1, alias="athleteId")
    blocks: list[PlanBlockInput] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def coerce_blocks(blocks: Iterable[TrainingBlock | dict[str, Any]]) -> list[TrainingBlock]:
    """Turn a mixed sequence of blocks and raw payload dicts into TrainingBlocks.

    Order is preserved. Raises pydantic.ValidationError on malformed payloads.
    """
    result: list[TrainingBlock] = []
    for index, block in enumerate(blocks):
        if isinstance(block, TrainingBlock):
            result.append(block)
        else:
            result.append(TrainingBlockInput.model_validate(block).to_block(index))
    return result
