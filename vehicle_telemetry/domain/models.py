"""
Domain models and enums.

This module defines the core domain-level types used across the pipeline:
- Sensor snapshots produced by a sensor source (battery, speed, temperature)
- VehicleState, the cumulative view owned by the shared state store
- ReportRecord, the immutable unit of work travelling through the uplink queue
- Delivery status and trigger kinds

These are immutable (frozen) dataclasses so they can be handed across threads
without copying or locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

# Physical ranges of the sensor channels (inclusive).
BATTERY_RANGE: Tuple[float, float] = (0.0, 100.0)
SPEED_RANGE: Tuple[float, float] = (0.0, 80.0)
TEMPERATURE_RANGE: Tuple[float, float] = (20.0, 75.0)


class SendStatus(str, Enum):
    """
    Outcome of one delivery attempt through a cloud transport.

    Members
    -------
    SUCCESS : str
        The collector accepted the report.
    FAILURE : str
        The report was not delivered and may be retried.
    """

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class TriggerKind(str, Enum):
    """
    Reason a report was produced.

    Members
    -------
    IDLE_BATTERY_DRIFT : str
        Battery moved beyond the reporting threshold while the vehicle was idle.
    PERIODIC_MOTION : str
        Regular update while the vehicle is moving.
    CRITICAL_TEMPERATURE : str
        Temperature above the critical limit.
    """

    IDLE_BATTERY_DRIFT = "IDLE_BATTERY_DRIFT"
    PERIODIC_MOTION = "PERIODIC_MOTION"
    CRITICAL_TEMPERATURE = "CRITICAL_TEMPERATURE"


@dataclass(frozen=True)
class SensorSnapshot:
    """
    One reading of all vehicle sensor channels.

    Parameters
    ----------
    battery
        State of charge in percent (0-100).
    speed
        Vehicle speed in km/h (0-80).
    temperature
        Temperature in degrees Celsius (20-75).
    """

    battery: float = 0.0
    speed: float = 0.0
    temperature: float = 0.0


@dataclass(frozen=True)
class VehicleState:
    """
    Point-in-time copy of the shared vehicle state.

    Parameters
    ----------
    current
        Latest sensor snapshot.
    total_distance
        Accumulated distance in km. Never decreases.
    top_speed
        Highest speed observed so far. Never decreases.
    is_moving
        Whether ``current.speed`` exceeds the motion threshold.
    update_count
        Number of updates applied. Zero until the first reading arrives.
    """

    current: SensorSnapshot = field(default_factory=SensorSnapshot)
    total_distance: float = 0.0
    top_speed: float = 0.0
    is_moving: bool = False
    update_count: int = 0


@dataclass(frozen=True)
class ReportRecord:
    """
    Outbound report queued for the uplink.

    Parameters
    ----------
    snapshot
        Sensor values at the time the report was built.
    distance
        Total distance at the time the report was built.
    top_speed
        Top speed at the time the report was built.
    timestamp_ms
        Monotonic clock reading in milliseconds.
    triggers
        Trigger rules that fired on the tick that built this report.

    Notes
    -----
    A record has exactly one owner at a time: the evaluator until enqueue,
    the queue until dequeue, then the uplink sender.
    """

    snapshot: SensorSnapshot
    distance: float
    top_speed: float
    timestamp_ms: int
    triggers: Tuple[TriggerKind, ...] = ()
