"""SQLAlchemy-backed history store and plan readers."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from plancore.models import CompletedWorkout
from plancore.models import TrainingBlock as TrainingBlockRow
from plancore.models import TrainingPlan
from plancore.services.distance_estimator import calculate_plan_distance
from plancore.services.history_store import (
    HistoryStoreError,
    WorkoutHistoryStore,
    WorkoutSample,
    check_sample,
)
from plancore.services.plan_types import TrainingBlock


def _to_sample(row: CompletedWorkout) -> WorkoutSample:
    return check_sample(
        WorkoutSample(
            completed_at=row.completed_at,
            actual_distance=row.actual_distance,
            actual_duration=row.actual_duration,
            avg_heart_rate=row.avg_heart_rate,
            label=row.label,
        )
    )


def _eligible_workouts(athlete_id: str):
    return (
        select(CompletedWorkout)
        .where(
            CompletedWorkout.athlete_id == athlete_id,
            CompletedWorkout.actual_distance.is_not(None),
            CompletedWorkout.actual_distance > 0,
            CompletedWorkout.actual_duration.is_not(None),
            CompletedWorkout.actual_duration > 0,
        )
        .order_by(CompletedWorkout.completed_at.desc())
    )


class SqlWorkoutHistoryStore(WorkoutHistoryStore):
    """Reads completed workouts through an open SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fetch(self, stmt) -> list[WorkoutSample]:
        try:
            rows = self.session.execute(stmt).scalars().all()
        except SQLAlchemyError as exc:
            raise HistoryStoreError("completed workout query failed") from exc
        return [_to_sample(r) for r in rows]

    def query_recent_workouts_near_hr(
        self, athlete_id: str, hr_low: float, hr_high: float, limit: int = 10
    ) -> list[WorkoutSample]:
        stmt = (
            _eligible_workouts(athlete_id)
            .where(CompletedWorkout.avg_heart_rate.between(hr_low, hr_high))
            .limit(limit)
        )
        return self._fetch(stmt)

    def query_recent_workouts(self, athlete_id: str, limit: int = 50) -> list[WorkoutSample]:
        return self._fetch(_eligible_workouts(athlete_id).limit(limit))


def block_from_row(row: TrainingBlockRow) -> TrainingBlock:
    return TrainingBlock(
        duration_seconds=row.duration_seconds,
        distance_meters=row.distance_meters,
        hr_min=row.hr_min,
        hr_max=row.hr_max,
        pace_min=row.pace_min,
        pace_max=row.pace_max,
        repetitions=row.repetitions,
        block_type=row.type,
        order=row.order,
        rest_seconds=row.rest_seconds,
        notes=row.notes,
    )


def load_plan_blocks(session: Session, plan_id: int) -> list[TrainingBlock]:
    """Blocks of one plan in their planned order."""
    rows = session.execute(
        select(TrainingBlockRow)
        .where(TrainingBlockRow.plan_id == plan_id)
        .order_by(TrainingBlockRow.order, TrainingBlockRow.id)
    ).scalars().all()
    return [block_from_row(r) for r in rows]


def load_week_plans(
    session: Session, athlete_id: str, week_start: date, week_end: date
) -> list[list[TrainingBlock]]:
    """Block lists for every plan of the athlete dated in [week_start, week_end)."""
    plans = session.execute(
        select(TrainingPlan)
        .options(selectinload(TrainingPlan.blocks))
        .where(
            TrainingPlan.athlete_id == athlete_id,
            TrainingPlan.date >= week_start,
            TrainingPlan.date < week_end,
        )
        .order_by(TrainingPlan.date, TrainingPlan.id)
    ).scalars().all()
    return [[block_from_row(b) for b in plan.blocks] for plan in plans]


def stored_plan_distance(session: Session, plan_id: int) -> int:
    """Total distance of a persisted plan, using the plan athlete's own history."""
    plan = session.get(TrainingPlan, plan_id)
    if plan is None:
        raise LookupError(f"training plan {plan_id} not found")
    store = SqlWorkoutHistoryStore(session)
    return calculate_plan_distance(store, plan.athlete_id, load_plan_blocks(session, plan_id))
