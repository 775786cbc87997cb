from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from vehicle_telemetry.domain.models import (
    BATTERY_RANGE,
    SPEED_RANGE,
    TEMPERATURE_RANGE,
    SensorSnapshot,
)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


@dataclass
class RandomWalkSensorSource:
    """
    Random-walk vehicle sensor model.

    Each :meth:`read` advances three channels:

    - battery drains by ``battery_drain_per_read`` and wraps back to full
      once it drops below empty
    - speed moves by a uniform step in ``[-speed_step/2, +speed_step/2]``,
      clamped to the speed range
    - temperature moves by a uniform step in
      ``[-temperature_step/2, +temperature_step/2]``, clamped to the
      temperature range

    Notes
    -----
    Not thread-safe; intended to be read from a single sensor thread.

    Parameters
    ----------
    seed
        Seed for the private RNG. ``None`` seeds from system entropy.
    """

    seed: Optional[int] = None
    initial_battery: float = 100.0
    battery_drain_per_read: float = 0.001
    speed_step: float = 5.0
    temperature_step: float = 2.0
    initial_speed: float = 0.0
    initial_temperature: float = 25.0

    _rng: random.Random = field(init=False, repr=False)
    _battery: float = field(init=False, repr=False)
    _speed: float = field(init=False, repr=False)
    _temperature: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        self._battery = float(self.initial_battery)
        self._speed = float(self.initial_speed)
        self._temperature = float(self.initial_temperature)

    def read(self) -> SensorSnapshot:
        self._battery -= self.battery_drain_per_read
        if self._battery < BATTERY_RANGE[0]:
            self._battery = BATTERY_RANGE[1]

        self._speed = _clamp(
            self._speed + (self._rng.random() - 0.5) * self.speed_step,
            *SPEED_RANGE,
        )
        self._temperature = _clamp(
            self._temperature + (self._rng.random() - 0.5) * self.temperature_step,
            *TEMPERATURE_RANGE,
        )

        return SensorSnapshot(
            battery=self._battery,
            speed=self._speed,
            temperature=self._temperature,
        )
