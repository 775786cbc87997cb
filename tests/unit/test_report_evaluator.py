"""
Unit tests for vehicle_telemetry.core.trigger.report_evaluator.ReportEvaluator.

These tests drive the evaluator manually (no threads) with explicit
timestamps and validate:
- rule independence and "exactly one record per tick"
- queue-full handling (drop + warning, bookkeeping still advances)
- no evaluation before the first sensor update
- the idle battery end-to-end scenario
"""

from __future__ import annotations

import logging

from vehicle_telemetry.core.report_queue import BoundedReportQueue
from vehicle_telemetry.core.state_store import SharedVehicleState
from vehicle_telemetry.core.stats import PipelineStats
from vehicle_telemetry.core.trigger.report_evaluator import ReportEvaluator
from vehicle_telemetry.core.trigger.trigger_rules import (
    CriticalTemperatureRule,
    IdleBatteryDriftRule,
    PeriodicMotionRule,
)
from vehicle_telemetry.domain.models import SensorSnapshot, TriggerKind


def _build(capacity: int = 100):
    state = SharedVehicleState()
    queue = BoundedReportQueue(capacity=capacity)
    battery = IdleBatteryDriftRule(delta_threshold=0.5, last_battery_sent=100.0)
    periodic = PeriodicMotionRule(interval_ms=1000, last_send_ms=0)
    temp = CriticalTemperatureRule(critical_temperature=70.0)
    stats = PipelineStats()
    evaluator = ReportEvaluator(state, queue, [battery, periodic, temp], clock=lambda: 0, stats=stats)
    return state, queue, evaluator, battery, periodic, stats


def test_no_report_before_first_sensor_update() -> None:
    """
    The zeroed initial state (battery 0) must not look like a 100-point drop.
    """
    _, queue, evaluator, battery, _, stats = _build()

    assert evaluator.tick(now_ms=100) is None
    assert queue.size == 0
    assert battery.last_battery_sent == 100.0
    assert stats.snapshot().evaluator_ticks == 0


def test_idle_battery_change_enqueues_exactly_one_record() -> None:
    state, queue, evaluator, battery, _, _ = _build()
    state.update(SensorSnapshot(battery=99.4, speed=0.0, temperature=65.0))

    rec = evaluator.tick(now_ms=100)

    assert rec is not None
    assert rec.triggers == (TriggerKind.IDLE_BATTERY_DRIFT,)
    assert queue.size == 1
    assert battery.last_battery_sent == 99.4


def test_periodic_rule_enqueues_one_record_when_moving() -> None:
    state, queue, evaluator, _, periodic, _ = _build()
    state.update(SensorSnapshot(battery=100.0, speed=30.0, temperature=40.0))

    assert evaluator.tick(now_ms=500) is None
    rec = evaluator.tick(now_ms=1000)

    assert rec is not None
    assert rec.triggers == (TriggerKind.PERIODIC_MOTION,)
    assert queue.size == 1
    assert periodic.last_send_ms == 1000


def test_critical_temperature_enqueues_on_every_tick() -> None:
    state, queue, evaluator, _, _, _ = _build()
    state.update(SensorSnapshot(battery=100.0, speed=30.0, temperature=72.0))

    for i in range(5):
        evaluator.tick(now_ms=100 + i)

    assert queue.size == 5
    assert all(queue.dequeue().triggers == (TriggerKind.CRITICAL_TEMPERATURE,) for _ in range(5))  # type: ignore[union-attr]


def test_multiple_rules_in_one_tick_build_a_single_record() -> None:
    state, queue, evaluator, battery, _, _ = _build()
    state.update(SensorSnapshot(battery=98.0, speed=0.0, temperature=72.0))

    rec = evaluator.tick(now_ms=100)

    assert queue.size == 1
    assert rec is not None
    assert set(rec.triggers) == {TriggerKind.IDLE_BATTERY_DRIFT, TriggerKind.CRITICAL_TEMPERATURE}
    assert battery.last_battery_sent == 98.0


def test_record_is_built_from_the_snapshot() -> None:
    state, queue, evaluator, _, _, _ = _build()
    state.update(SensorSnapshot(battery=100.0, speed=60.0, temperature=72.0))

    evaluator.tick(now_ms=4242)

    rec = queue.dequeue()
    snap = state.snapshot()
    assert rec is not None
    assert rec.snapshot == snap.current
    assert rec.distance == snap.total_distance
    assert rec.top_speed == 60.0
    assert rec.timestamp_ms == 4242


def test_queue_full_drops_record_but_keeps_bookkeeping(caplog) -> None:
    state, queue, evaluator, battery, _, stats = _build(capacity=1)
    state.update(SensorSnapshot(battery=100.0, speed=0.0, temperature=72.0))
    evaluator.tick(now_ms=1)
    assert queue.is_full

    state.update(SensorSnapshot(battery=99.0, speed=0.0, temperature=72.0))
    with caplog.at_level(logging.WARNING, logger="vehicle_telemetry.evaluator"):
        rec = evaluator.tick(now_ms=2)

    assert rec is not None
    assert queue.size == 1
    assert battery.last_battery_sent == 99.0
    assert "Queue full" in caplog.text
    counts = stats.snapshot()
    assert counts.reports_enqueued == 1
    assert counts.reports_dropped == 1


def test_uses_clock_when_no_timestamp_given() -> None:
    state = SharedVehicleState()
    queue = BoundedReportQueue(capacity=10)
    evaluator = ReportEvaluator(state, queue, [CriticalTemperatureRule()], clock=lambda: 777)
    state.update(SensorSnapshot(battery=100.0, speed=0.0, temperature=75.0))

    rec = evaluator.tick()

    assert rec is not None
    assert rec.timestamp_ms == 777


def test_idle_battery_scenario_reports_once_over_100_ticks() -> None:
    """
    Battery 100 -> 99.4 over 100 evaluator ticks at speed 0 crosses the 0.5
    threshold exactly once; the remaining 0.1 drift stays below it.
    """
    state, queue, evaluator, battery, _, _ = _build()
    state.update(SensorSnapshot(battery=100.0, speed=0.0, temperature=25.0))

    for i in range(1, 101):
        state.update(SensorSnapshot(battery=100.0 - 0.006 * i, speed=0.0, temperature=25.0))
        evaluator.tick(now_ms=i * 100)

    assert queue.size == 1
    assert 99.4 < battery.last_battery_sent < 99.5
