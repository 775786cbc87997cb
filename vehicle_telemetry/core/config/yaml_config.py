from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from vehicle_telemetry.errors import TelemetryConfigError

CONFIG_ENV_VAR = "VEHICLE_TELEMETRY_CONFIG"
TRANSPORT_KINDS = ("simulated", "webhook")


@dataclass(frozen=True)
class SensorLoopConfig:
    """Sensor updater timing and state derivation settings."""
    period_s: float = 0.01
    motion_threshold: float = 0.5
    speed_time_unit_s: float = 3600.0


@dataclass(frozen=True)
class EvaluatorConfig:
    """Report evaluator timing and trigger thresholds."""
    period_s: float = 0.1
    battery_delta_threshold: float = 0.5
    initial_battery_sent: float = 100.0
    periodic_interval_ms: int = 1000
    critical_temperature: float = 70.0


@dataclass(frozen=True)
class QueueConfig:
    """Bounded report queue settings."""
    capacity: int = 1000


@dataclass(frozen=True)
class UplinkConfig:
    """Uplink sender polling settings."""
    poll_interval_s: float = 0.1


@dataclass(frozen=True)
class SimulatedCloudConfig:
    """SimulatedCloudTransport parameters (random latency + failure rate)."""
    min_delay_s: float = 1.0
    max_delay_s: float = 10.0
    success_rate: float = 0.9
    seed: Optional[int] = None


@dataclass(frozen=True)
class WebhookConfigData:
    """Webhook transport configuration (URL + auth)."""
    url: str
    auth_header: Optional[str] = None
    timeout_s: float = 3.0
    verify_tls: bool = True


@dataclass(frozen=True)
class TransportConfig:
    """Which cloud transport to build, plus its settings."""
    kind: str = "simulated"
    simulated: SimulatedCloudConfig = field(default_factory=SimulatedCloudConfig)
    webhook: Optional[WebhookConfigData] = None


@dataclass(frozen=True)
class SimulatorConfig:
    """RandomWalkSensorSource parameters."""
    seed: Optional[int] = None
    initial_battery: float = 100.0
    battery_drain_per_read: float = 0.001
    speed_step: float = 5.0
    temperature_step: float = 2.0
    initial_temperature: float = 25.0


@dataclass(frozen=True)
class LoggingConfig:
    """Root logging level and format."""
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class PipelineConfig:
    """
    Root pipeline configuration loaded from YAML.

    Every section and key is optional; missing values fall back to the
    dataclass defaults.
    """
    sensor: SensorLoopConfig = field(default_factory=SensorLoopConfig)
    evaluator: EvaluatorConfig = field(default_factory=EvaluatorConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    uplink: UplinkConfig = field(default_factory=UplinkConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    simulator: SimulatorConfig = field(default_factory=SimulatorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise TelemetryConfigError("config.yaml must contain a YAML mapping at the root")
    return data


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    sec = raw.get(key) or {}
    if not isinstance(sec, dict):
        raise TelemetryConfigError(f"'{key}' must be a mapping")
    return sec


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise TelemetryConfigError(f"{name} must be > 0, got {value}")
    return value


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _resolve_default_config_path() -> Optional[Path]:
    """
    Resolve config.yaml location.

    Priority:
    1) VEHICLE_TELEMETRY_CONFIG env var if provided
    2) config.yaml next to the executable
    3) ./config.yaml in current working directory

    Returns None when none of the candidates exist.
    """
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser().resolve()

    exe_dir = Path(sys.executable).resolve().parent
    candidate = exe_dir / "config.yaml"
    if candidate.exists():
        return candidate

    cwd_candidate = Path("config.yaml").resolve()
    if cwd_candidate.exists():
        return cwd_candidate
    return None


def parse_pipeline_config(raw: Dict[str, Any]) -> PipelineConfig:
    """
    Convert a raw YAML mapping into typed, validated config objects.

    Raises
    ------
    TelemetryConfigError
        If a value is out of range or a section has the wrong shape.
    """
    # ---- sensor ----
    s = _section(raw, "sensor")
    sensor = SensorLoopConfig(
        period_s=_positive("sensor.period_s", float(s.get("period_s", 0.01))),
        motion_threshold=float(s.get("motion_threshold", 0.5)),
        speed_time_unit_s=_positive("sensor.speed_time_unit_s", float(s.get("speed_time_unit_s", 3600.0))),
    )

    # ---- evaluator ----
    e = _section(raw, "evaluator")
    evaluator = EvaluatorConfig(
        period_s=_positive("evaluator.period_s", float(e.get("period_s", 0.1))),
        battery_delta_threshold=float(e.get("battery_delta_threshold", 0.5)),
        initial_battery_sent=float(e.get("initial_battery_sent", 100.0)),
        periodic_interval_ms=int(e.get("periodic_interval_ms", 1000)),
        critical_temperature=float(e.get("critical_temperature", 70.0)),
    )

    # ---- queue ----
    q = _section(raw, "queue")
    capacity = int(q.get("capacity", 1000))
    if capacity < 1:
        raise TelemetryConfigError(f"queue.capacity must be >= 1, got {capacity}")
    queue = QueueConfig(capacity=capacity)

    # ---- uplink ----
    u = _section(raw, "uplink")
    uplink = UplinkConfig(
        poll_interval_s=_positive("uplink.poll_interval_s", float(u.get("poll_interval_s", 0.1))),
    )

    # ---- transport ----
    t = _section(raw, "transport")
    kind = str(t.get("kind", "simulated"))
    if kind not in TRANSPORT_KINDS:
        raise TelemetryConfigError(f"transport.kind must be one of {TRANSPORT_KINDS}, got {kind!r}")

    sc = _section(t, "simulated")
    simulated = SimulatedCloudConfig(
        min_delay_s=float(sc.get("min_delay_s", 1.0)),
        max_delay_s=float(sc.get("max_delay_s", 10.0)),
        success_rate=float(sc.get("success_rate", 0.9)),
        seed=_opt_int(sc.get("seed")),
    )
    if simulated.min_delay_s < 0 or simulated.max_delay_s < simulated.min_delay_s:
        raise TelemetryConfigError("transport.simulated delays must satisfy 0 <= min_delay_s <= max_delay_s")
    if not 0.0 <= simulated.success_rate <= 1.0:
        raise TelemetryConfigError("transport.simulated.success_rate must be within [0, 1]")

    webhook: Optional[WebhookConfigData] = None
    w = _section(t, "webhook")
    if w:
        if "url" not in w:
            raise TelemetryConfigError("transport.webhook.url is required")
        webhook = WebhookConfigData(
            url=str(w["url"]),
            auth_header=w.get("auth_header"),
            timeout_s=float(w.get("timeout_s", 3.0)),
            verify_tls=bool(w.get("verify_tls", True)),
        )
    if kind == "webhook" and webhook is None:
        raise TelemetryConfigError("transport.kind is 'webhook' but no transport.webhook section was given")

    transport = TransportConfig(kind=kind, simulated=simulated, webhook=webhook)

    # ---- simulator ----
    sim = _section(raw, "simulator")
    simulator = SimulatorConfig(
        seed=_opt_int(sim.get("seed")),
        initial_battery=float(sim.get("initial_battery", 100.0)),
        battery_drain_per_read=float(sim.get("battery_drain_per_read", 0.001)),
        speed_step=float(sim.get("speed_step", 5.0)),
        temperature_step=float(sim.get("temperature_step", 2.0)),
        initial_temperature=float(sim.get("initial_temperature", 25.0)),
    )

    # ---- logging ----
    lg = _section(raw, "logging")
    log_cfg = LoggingConfig(
        level=str(lg.get("level", "INFO")).upper(),
        format=str(lg.get("format", LoggingConfig.format)),
    )

    return PipelineConfig(
        sensor=sensor,
        evaluator=evaluator,
        queue=queue,
        uplink=uplink,
        transport=transport,
        simulator=simulator,
        logging=log_cfg,
    )


def load_pipeline_config(path: Optional[str] = None) -> PipelineConfig:
    """
    Load pipeline configuration from YAML.

    Parameters
    ----------
    path
        Explicit path to config.yaml. If None, uses default resolution and
        falls back to built-in defaults when no file is found.

    Returns
    -------
    PipelineConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If an explicitly requested config file does not exist.
    ValueError
        If a value is missing or invalid (:class:`TelemetryConfigError`).
    """
    if path:
        cfg_path: Optional[Path] = Path(path).expanduser().resolve()
    else:
        cfg_path = _resolve_default_config_path()

    if cfg_path is None:
        return PipelineConfig()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")

    return parse_pipeline_config(_read_yaml(cfg_path))
