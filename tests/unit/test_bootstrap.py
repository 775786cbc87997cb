"""
Unit tests for vehicle_telemetry.bootstrap and PipelineRuntime.

Validates:
- transport and sensor source selection from configuration
- rule construction from evaluator settings
- a short real run with fake collaborators starts, delivers, and stops cleanly
"""

from __future__ import annotations

import threading
import time
from dataclasses import replace
from typing import List

from simulator.cloud import SimulatedCloudTransport
from simulator.sensors.replay import ReplaySensorSource
from simulator.sensors.vehicle import RandomWalkSensorSource
from vehicle_telemetry.bootstrap import build_pipeline, build_rules, build_sensor_source, build_transport
from vehicle_telemetry.core.config.yaml_config import (
    EvaluatorConfig,
    PipelineConfig,
    SensorLoopConfig,
    TransportConfig,
    UplinkConfig,
    WebhookConfigData,
)
from vehicle_telemetry.core.trigger.trigger_rules import (
    CriticalTemperatureRule,
    IdleBatteryDriftRule,
    PeriodicMotionRule,
)
from vehicle_telemetry.domain.models import ReportRecord, SendStatus, SensorSnapshot, TriggerKind
from vehicle_telemetry.transport.webhook_transport import WebhookTransport


class RecordingTransport:
    def __init__(self) -> None:
        self.sent: List[ReportRecord] = []
        self._lock = threading.Lock()

    def send(self, record: ReportRecord) -> SendStatus:
        with self._lock:
            self.sent.append(record)
        return SendStatus.SUCCESS

    def count(self) -> int:
        with self._lock:
            return len(self.sent)


def test_build_transport_defaults_to_simulated() -> None:
    assert isinstance(build_transport(PipelineConfig()), SimulatedCloudTransport)


def test_build_transport_webhook() -> None:
    cfg = PipelineConfig(
        transport=TransportConfig(kind="webhook", webhook=WebhookConfigData(url="https://collector.test/r")),
    )
    assert isinstance(build_transport(cfg), WebhookTransport)


def test_build_sensor_source_is_random_walk() -> None:
    assert isinstance(build_sensor_source(PipelineConfig()), RandomWalkSensorSource)


def test_build_rules_uses_evaluator_settings() -> None:
    cfg = PipelineConfig(
        evaluator=EvaluatorConfig(
            battery_delta_threshold=1.0,
            initial_battery_sent=90.0,
            periodic_interval_ms=250,
            critical_temperature=60.0,
        )
    )

    battery, periodic, temp = build_rules(cfg, clock=lambda: 5000)

    assert isinstance(battery, IdleBatteryDriftRule)
    assert battery.delta_threshold == 1.0
    assert battery.last_battery_sent == 90.0
    assert isinstance(periodic, PeriodicMotionRule)
    assert periodic.interval_ms == 250
    assert periodic.last_send_ms == 5000
    assert isinstance(temp, CriticalTemperatureRule)
    assert temp.critical_temperature == 60.0


def test_pipeline_runs_and_stops_cleanly() -> None:
    """
    A hot vehicle reports on every evaluator tick; the reports flow through
    the queue to the transport while the pipeline runs.
    """
    cfg = replace(
        PipelineConfig(),
        sensor=SensorLoopConfig(period_s=0.005),
        evaluator=EvaluatorConfig(period_s=0.02),
        uplink=UplinkConfig(poll_interval_s=0.01),
    )
    transport = RecordingTransport()
    source = ReplaySensorSource([SensorSnapshot(battery=100.0, speed=30.0, temperature=74.0)])

    wiring = build_pipeline(config=cfg, source=source, transport=transport)
    wiring.runtime.start()
    try:
        deadline = time.monotonic() + 5.0
        while transport.count() < 3 and time.monotonic() < deadline:
            time.sleep(0.01)
    finally:
        wiring.runtime.stop(timeout=2.0)

    assert not wiring.runtime.is_running()
    assert transport.count() >= 3
    assert all(TriggerKind.CRITICAL_TEMPERATURE in r.triggers for r in transport.sent)

    stats = wiring.runtime.stats
    assert stats.sensor_updates > 0
    assert stats.deliveries_ok == transport.count()
