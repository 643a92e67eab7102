from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Sequence

from sqlalchemy.orm import Session

from plancore.config import get_settings
from plancore.services.distance_estimator import round_half_up
from plancore.services.plan_types import TrainingBlock
from plancore.services.sql_store import load_week_plans

TYPE_PACE_SEC_PER_KM = {"WARMUP": 360.0, "COOLDOWN": 360.0, "INTERVALS": 240.0}
DEFAULT_TYPE_PACE = 300.0


def week_bounds(today: date) -> tuple[date, date]:
    """Monday of the current week and the following Monday."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=7)


def _usable(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def block_pace(block: TrainingBlock) -> float:
    if _usable(block.pace_min) and _usable(block.pace_max):
        return (block.pace_min + block.pace_max) / 2
    return TYPE_PACE_SEC_PER_KM.get(block.block_type or "", DEFAULT_TYPE_PACE)


def planned_week_distance_m(plans: Sequence[Sequence[TrainingBlock]]) -> float:
    """Rough planned volume from block types, no history lookups."""
    total = 0.0
    for blocks in plans:
        for block in blocks:
            if block.has_explicit_distance:
                total += block.distance_meters
            elif _usable(block.duration_seconds):
                total += block.duration_seconds / block_pace(block) * 1000
    return total


def dynamic_weekly_goal_km(
    plans: Sequence[Sequence[TrainingBlock]],
    user_goal_setting: int | None,
    default_goal_km: int | None = None,
) -> int:
    """Weekly goal in km from this week's plans, else the athlete's own setting."""
    if default_goal_km is None:
        default_goal_km = get_settings().default_weekly_goal_km
    if not plans:
        return user_goal_setting if user_goal_setting is not None else default_goal_km
    return round_half_up(planned_week_distance_m(plans) / 1000)


def calculate_dynamic_weekly_goal(
    session: Session, athlete_id: str, user_goal_setting: int | None, today: date
) -> int:
    """Weekly goal for the week containing ``today``, read from stored plans."""
    week_start, week_end = week_bounds(today)
    plans = load_week_plans(session, athlete_id, week_start, week_end)
    return dynamic_weekly_goal_km(plans, user_goal_setting)
