from __future__ import annotations

import threading
from dataclasses import dataclass, field

from vehicle_telemetry.domain.models import SensorSnapshot, VehicleState

DEFAULT_TICK_PERIOD_S = 0.01
SECONDS_PER_HOUR = 3600.0
DEFAULT_MOTION_THRESHOLD = 0.5


@dataclass
class SharedVehicleState:
    """
    Thread-safe owner of the vehicle state.

    Concurrency Model
    -----------------
    All reads and writes are guarded by a single lock (`threading.Lock`).
    One :meth:`update` or one :meth:`snapshot` completes atomically, so a
    reader never observes distance from one update and top speed from another.

    Parameters
    ----------
    tick_period_s
        Fixed interval between updates, in seconds.
    speed_time_unit_s
        Length of the speed unit's time base in seconds (3600 for km/h).
    motion_threshold
        Speed above which the vehicle counts as moving.
    """

    tick_period_s: float = DEFAULT_TICK_PERIOD_S
    speed_time_unit_s: float = SECONDS_PER_HOUR
    motion_threshold: float = DEFAULT_MOTION_THRESHOLD

    _state: VehicleState = field(default_factory=VehicleState, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def elapsed_fraction(self) -> float:
        """Tick interval expressed in the speed unit's time base."""
        return self.tick_period_s / self.speed_time_unit_s

    def update(self, reading: SensorSnapshot) -> None:
        """
        Apply one sensor reading.

        Parameters
        ----------
        reading
            Fresh snapshot from the sensor source.

        Notes
        -----
        Negative speeds contribute no distance so ``total_distance`` stays
        monotonic even with a misbehaving source.
        """
        step = max(0.0, reading.speed) * self.elapsed_fraction
        with self._lock:
            prev = self._state
            self._state = VehicleState(
                current=reading,
                total_distance=prev.total_distance + step,
                top_speed=max(prev.top_speed, reading.speed),
                is_moving=reading.speed > self.motion_threshold,
                update_count=prev.update_count + 1,
            )

    def snapshot(self) -> VehicleState:
        """
        Return a consistent copy of the vehicle state.

        Returns
        -------
        VehicleState
            Immutable view of all fields as of the last completed update.
        """
        with self._lock:
            return self._state
