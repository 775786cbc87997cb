from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import List, Optional

from simulator.cloud import SimulatedCloudTransport
from simulator.sensors.vehicle import RandomWalkSensorSource
from vehicle_telemetry.core.config.yaml_config import PipelineConfig, load_pipeline_config
from vehicle_telemetry.core.report_queue import BoundedReportQueue
from vehicle_telemetry.core.sensor_source import SensorSource
from vehicle_telemetry.core.state_store import SharedVehicleState
from vehicle_telemetry.core.stats import PipelineStats
from vehicle_telemetry.core.trigger.report_evaluator import Clock, ReportEvaluator, monotonic_ms
from vehicle_telemetry.core.trigger.trigger_base import TriggerRule
from vehicle_telemetry.core.trigger.trigger_rules import (
    CriticalTemperatureRule,
    IdleBatteryDriftRule,
    PeriodicMotionRule,
)
from vehicle_telemetry.runtime.pipeline_runtime import PipelineRuntime
from vehicle_telemetry.runtime.report_evaluator_thread import ReportEvaluatorThread
from vehicle_telemetry.runtime.sensor_updater_thread import SensorUpdaterThread
from vehicle_telemetry.runtime.uplink_sender_thread import UplinkSenderThread
from vehicle_telemetry.transport.base import CloudTransport
from vehicle_telemetry.transport.webhook_transport import WebhookConfig, WebhookTransport


@dataclass(frozen=True)
class PipelineWiring:
    """Everything the entry point (or a test) needs to run the pipeline."""
    config: PipelineConfig
    state: SharedVehicleState
    queue: BoundedReportQueue
    stats: PipelineStats
    evaluator: ReportEvaluator
    runtime: PipelineRuntime


def build_rules(cfg: PipelineConfig, clock: Clock = monotonic_ms) -> List[TriggerRule]:
    ev = cfg.evaluator
    return [
        IdleBatteryDriftRule(
            delta_threshold=ev.battery_delta_threshold,
            last_battery_sent=ev.initial_battery_sent,
        ),
        PeriodicMotionRule(interval_ms=ev.periodic_interval_ms, last_send_ms=clock()),
        CriticalTemperatureRule(critical_temperature=ev.critical_temperature),
    ]


def build_sensor_source(cfg: PipelineConfig) -> SensorSource:
    sim = cfg.simulator
    return RandomWalkSensorSource(
        seed=sim.seed,
        initial_battery=sim.initial_battery,
        battery_drain_per_read=sim.battery_drain_per_read,
        speed_step=sim.speed_step,
        temperature_step=sim.temperature_step,
        initial_temperature=sim.initial_temperature,
    )


def build_transport(cfg: PipelineConfig, stop_event: Optional[threading.Event] = None) -> CloudTransport:
    t = cfg.transport
    if t.kind == "webhook":
        if t.webhook is None:
            raise ValueError("webhook transport selected without webhook settings")
        return WebhookTransport(
            WebhookConfig(
                url=t.webhook.url,
                auth_header=t.webhook.auth_header,
                timeout_s=t.webhook.timeout_s,
                verify_tls=t.webhook.verify_tls,
            )
        )

    sc = t.simulated
    return SimulatedCloudTransport(
        min_delay_s=sc.min_delay_s,
        max_delay_s=sc.max_delay_s,
        success_rate=sc.success_rate,
        seed=sc.seed,
        stop_event=stop_event,
    )


def build_pipeline(
    config_path: Optional[str] = None,
    *,
    config: Optional[PipelineConfig] = None,
    source: Optional[SensorSource] = None,
    transport: Optional[CloudTransport] = None,
    clock: Clock = monotonic_ms,
) -> PipelineWiring:
    """
    Construct every pipeline object once and hand them to the workers.

    Parameters
    ----------
    config_path
        YAML config path; ignored when ``config`` is given.
    config
        Already-parsed configuration.
    source
        Sensor source override (defaults to the random-walk simulator).
    transport
        Cloud transport override (defaults to the configured transport).
    clock
        Millisecond clock for evaluator timestamps.
    """
    cfg = config or load_pipeline_config(config_path)
    stop = threading.Event()

    # --- SHARED OBJECTS ---
    stats = PipelineStats()
    state = SharedVehicleState(
        tick_period_s=cfg.sensor.period_s,
        speed_time_unit_s=cfg.sensor.speed_time_unit_s,
        motion_threshold=cfg.sensor.motion_threshold,
    )
    queue = BoundedReportQueue(capacity=cfg.queue.capacity)

    # --- COLLABORATORS ---
    sensor_source = source or build_sensor_source(cfg)
    cloud = transport or build_transport(cfg, stop_event=stop)

    # --- EVALUATION ---
    evaluator = ReportEvaluator(state, queue, build_rules(cfg, clock), clock=clock, stats=stats)

    # --- RUNTIME ---
    runtime = PipelineRuntime(
        sensor=SensorUpdaterThread(sensor_source, state, stop, period_s=cfg.sensor.period_s, stats=stats),
        evaluator=ReportEvaluatorThread(evaluator, stop, period_s=cfg.evaluator.period_s),
        uplink=UplinkSenderThread(queue, cloud, stop, poll_interval_s=cfg.uplink.poll_interval_s, stats=stats),
        stop_event=stop,
        stats=stats,
    )

    return PipelineWiring(
        config=cfg,
        state=state,
        queue=queue,
        stats=stats,
        evaluator=evaluator,
        runtime=runtime,
    )
