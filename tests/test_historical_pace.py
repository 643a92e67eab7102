"""Tests for the historical pace lookup."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from plancore.services.historical_pace import lookup_historical_pace
from plancore.services.history_store import (
    InMemoryHistoryStore,
    MalformedWorkoutRecord,
    WorkoutHistoryStore,
    WorkoutSample,
)

BASE = datetime(2026, 3, 1, 7, 0)


def _sample(pace: float, hr: float | None = 150, days_ago: int = 0, distance: float = 10000) -> WorkoutSample:
    return WorkoutSample(
        completed_at=BASE - timedelta(days=days_ago),
        actual_distance=distance,
        actual_duration=pace * distance / 1000,
        avg_heart_rate=hr,
    )


def test_mean_of_three_paces():
    store = InMemoryHistoryStore({"a1": [_sample(300), _sample(310, days_ago=1), _sample(320, days_ago=2)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(310.0)


def test_no_records_returns_none():
    store = InMemoryHistoryStore()
    assert lookup_historical_pace(store, "a1", 150) is None


def test_no_records_near_hr_returns_none():
    store = InMemoryHistoryStore({"a1": [_sample(300, hr=120)]})
    assert lookup_historical_pace(store, "a1", 150) is None


def test_tolerance_band_inclusive_at_ten_bpm():
    store = InMemoryHistoryStore({"a1": [_sample(300, hr=160), _sample(400, hr=161, days_ago=1)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(300.0)


def test_lower_bound_inclusive():
    store = InMemoryHistoryStore({"a1": [_sample(330, hr=140), _sample(400, hr=139, days_ago=1)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(330.0)


def test_only_ten_most_recent_used():
    recent = [_sample(300, days_ago=i) for i in range(10)]
    older = [_sample(600, days_ago=30 + i) for i in range(5)]
    store = InMemoryHistoryStore({"a1": older + recent})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(300.0)


def test_mean_is_unweighted_by_distance():
    # a long slow run does not outweigh a short fast one
    store = InMemoryHistoryStore({"a1": [_sample(300, distance=2000), _sample(360, distance=20000, days_ago=1)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(330.0)


def test_ineligible_workouts_ignored():
    bad = WorkoutSample(completed_at=BASE, actual_distance=0, actual_duration=1800, avg_heart_rate=150)
    store = InMemoryHistoryStore({"a1": [bad, _sample(320, days_ago=1)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(320.0)


def test_other_athletes_ignored():
    store = InMemoryHistoryStore({"a1": [_sample(300)], "a2": [_sample(500)]})
    assert lookup_historical_pace(store, "a1", 150) == pytest.approx(300.0)


def test_requeries_every_call():
    store = InMemoryHistoryStore({"a1": [_sample(300)]})
    lookup_historical_pace(store, "a1", 150)
    lookup_historical_pace(store, "a1", 150)
    assert store.query_count == 2


def test_non_positive_target_hr_rejected():
    with pytest.raises(ValueError):
        lookup_historical_pace(InMemoryHistoryStore(), "a1", 0)


def test_custom_tolerance_and_limit():
    store = InMemoryHistoryStore({"a1": [_sample(300, hr=155), _sample(360, hr=150, days_ago=1)]})
    assert lookup_historical_pace(store, "a1", 150, tolerance_bpm=2) == pytest.approx(360.0)
    assert lookup_historical_pace(store, "a1", 150, limit=1) == pytest.approx(300.0)


def test_tolerance_from_settings(monkeypatch):
    monkeypatch.setenv("HR_TOLERANCE_BPM", "3")
    store = InMemoryHistoryStore({"a1": [_sample(300, hr=160)]})
    assert lookup_historical_pace(store, "a1", 150) is None


class _BrokenStore(WorkoutHistoryStore):
    def query_recent_workouts_near_hr(self, athlete_id, hr_low, hr_high, limit=10):
        return [WorkoutSample(completed_at=BASE, actual_distance=-5, actual_duration=100, avg_heart_rate=150)]

    def query_recent_workouts(self, athlete_id, limit=50):
        return []


def test_malformed_record_raises_not_none():
    with pytest.raises(MalformedWorkoutRecord):
        lookup_historical_pace(_BrokenStore(), "a1", 150)
