"""Tests for runtime wiring and stored plan refresh."""

from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from plancore import db
from plancore.bootstrap import init_runtime, refresh_plan_distance
from plancore.logging_config import JSONFormatter
from plancore.models import Athlete, CompletedWorkout, TrainingBlock, TrainingPlan
from plancore.services.history_store import HistoryStoreError


@pytest.fixture()
def runtime(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'plancore_boot.db'}")
    monkeypatch.setenv("APP_ENV", "staging")
    db.get_engine.cache_clear()
    db.get_session_factory.cache_clear()
    settings = init_runtime(create_schema=True)
    yield settings
    db.get_engine().dispose()
    db.get_engine.cache_clear()
    db.get_session_factory.cache_clear()


def _seed_plan() -> int:
    with db.db_session() as s:
        s.add(Athlete(id="a1", first_name="Ana", last_name="Ruiz", email="ana@example.com"))
        s.add(CompletedWorkout(
            athlete_id="a1", completed_at=datetime(2026, 3, 1, 7), avg_heart_rate=150,
            actual_distance=10000, actual_duration=3000,
        ))
        plan = TrainingPlan(athlete_id="a1", date=date(2026, 3, 4), title="Steady")
        plan.blocks = [
            TrainingBlock(order=0, type="WARMUP", duration_seconds=900),
            TrainingBlock(order=1, type="RUN", duration_seconds=1800, hr_min=145, hr_max=155),
        ]
        s.add(plan)
        s.flush()
        return plan.id


def test_init_runtime_configures_json_logging(runtime):
    assert runtime.app_env == "staging"
    root = logging.getLogger()
    assert any(isinstance(h.formatter, JSONFormatter) for h in root.handlers)


def test_refresh_plan_distance_persists_total(runtime):
    plan_id = _seed_plan()
    # 900 s at 360 s/km + 1800 s at the athlete's 300 s/km
    assert refresh_plan_distance(plan_id) == 2500 + 6000
    with db.db_session() as s:
        assert s.get(TrainingPlan, plan_id).estimated_distance == 8500


def test_refresh_plan_distance_store_failure_leaves_plan_untouched(runtime):
    plan_id = _seed_plan()
    with db.db_session() as s:
        s.connection().exec_driver_sql("DROP TABLE completed_workouts")
    with pytest.raises(HistoryStoreError):
        refresh_plan_distance(plan_id)
    with db.db_session() as s:
        assert s.get(TrainingPlan, plan_id).estimated_distance is None
