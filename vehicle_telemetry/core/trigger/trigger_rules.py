from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from vehicle_telemetry.core.trigger.trigger_base import TriggerContext, TriggerDecision
from vehicle_telemetry.domain.models import TriggerKind, VehicleState

DEFAULT_BATTERY_DELTA = 0.5
DEFAULT_INITIAL_BATTERY_SENT = 100.0
DEFAULT_PERIODIC_INTERVAL_MS = 1000
DEFAULT_CRITICAL_TEMPERATURE = 70.0


@dataclass
class IdleBatteryDriftRule:
    """
    Report when the battery level drifts while the vehicle is idle.

    Fires when the vehicle is not moving and the battery differs from the last
    reported battery value by more than ``delta_threshold``. On fire the
    reported value becomes the new reference.

    Parameters
    ----------
    delta_threshold
        Minimum absolute change (percentage points) that triggers a report.
    last_battery_sent
        Battery value the next comparison is made against.
    """

    delta_threshold: float = DEFAULT_BATTERY_DELTA
    last_battery_sent: float = DEFAULT_INITIAL_BATTERY_SENT

    kind: TriggerKind = field(default=TriggerKind.IDLE_BATTERY_DRIFT, init=False)

    def evaluate(self, state: VehicleState, ctx: TriggerContext) -> TriggerDecision:
        battery = state.current.battery
        change = abs(battery - self.last_battery_sent)
        if state.is_moving or change <= self.delta_threshold:
            return TriggerDecision(kind=self.kind, fired=False)

        self.last_battery_sent = battery
        return TriggerDecision(
            kind=self.kind,
            fired=True,
            message=f"Battery changed while idle ({change:.2f} points, now {battery:.1f}%)",
        )


@dataclass
class PeriodicMotionRule:
    """
    Report at a fixed interval while the vehicle is moving.

    Parameters
    ----------
    interval_ms
        Minimum time between two periodic reports.
    last_send_ms
        Monotonic time of the last periodic report. ``None`` means the rule
        has not been anchored yet; the first evaluation anchors it to
        ``ctx.now_ms`` without firing.
    """

    interval_ms: int = DEFAULT_PERIODIC_INTERVAL_MS
    last_send_ms: Optional[int] = None

    kind: TriggerKind = field(default=TriggerKind.PERIODIC_MOTION, init=False)

    def evaluate(self, state: VehicleState, ctx: TriggerContext) -> TriggerDecision:
        if self.last_send_ms is None:
            self.last_send_ms = ctx.now_ms

        if not state.is_moving or ctx.now_ms - self.last_send_ms < self.interval_ms:
            return TriggerDecision(kind=self.kind, fired=False)

        self.last_send_ms = ctx.now_ms
        return TriggerDecision(kind=self.kind, fired=True, message="Periodic update (moving)")


@dataclass
class CriticalTemperatureRule:
    """
    Report on every tick while the temperature is above the critical limit.

    Stateless: keeps firing for as long as the condition holds.
    """

    critical_temperature: float = DEFAULT_CRITICAL_TEMPERATURE

    kind: TriggerKind = field(default=TriggerKind.CRITICAL_TEMPERATURE, init=False)

    def evaluate(self, state: VehicleState, ctx: TriggerContext) -> TriggerDecision:
        temp = state.current.temperature
        if temp <= self.critical_temperature:
            return TriggerDecision(kind=self.kind, fired=False)
        return TriggerDecision(
            kind=self.kind,
            fired=True,
            message=f"CRITICAL TEMP ALERT! ({temp:.1f} > {self.critical_temperature:.1f})",
        )
