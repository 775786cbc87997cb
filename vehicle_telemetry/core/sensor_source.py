from __future__ import annotations

from typing import Protocol

from vehicle_telemetry.domain.models import SensorSnapshot


class SensorSource(Protocol):
    """
    Protocol interface for anything that produces vehicle sensor readings.

    Implementations may be random, replayed from a fixture, or wired to real
    hardware. The pipeline only relies on the value ranges documented on
    :class:`~vehicle_telemetry.domain.models.SensorSnapshot`.

    Methods
    -------
    read()
        Return one fresh snapshot.
    """

    def read(self) -> SensorSnapshot:
        """
        Produce one sensor reading.

        Returns
        -------
        SensorSnapshot
            New immutable snapshot.
        """
        ...
