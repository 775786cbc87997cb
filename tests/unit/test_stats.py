"""
Unit tests for vehicle_telemetry.core.stats.PipelineStats.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from vehicle_telemetry.core.stats import PipelineStats, StatsSnapshot


def test_counters_start_at_zero() -> None:
    assert PipelineStats().snapshot() == StatsSnapshot()


def test_incr_updates_named_counter_only() -> None:
    stats = PipelineStats()
    stats.incr("requeued")
    stats.incr("requeued", 2)

    snap = stats.snapshot()
    assert snap.requeued == 3
    assert snap.deliveries_ok == 0


def test_unknown_counter_raises() -> None:
    with pytest.raises(KeyError):
        PipelineStats().incr("not_a_counter")


def test_snapshot_is_immutable_copy() -> None:
    stats = PipelineStats()
    snap = stats.snapshot()
    stats.incr("sensor_updates")

    assert snap.sensor_updates == 0
    with pytest.raises(FrozenInstanceError):
        snap.sensor_updates = 5  # type: ignore[misc]
