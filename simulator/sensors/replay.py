from __future__ import annotations

import threading
from typing import Iterable, List

from vehicle_telemetry.domain.models import SensorSnapshot


class ReplaySensorSource:
    """
    Sensor source that replays a fixed sequence of snapshots.

    Useful for fixtures and deterministic runs. After the last snapshot the
    source either starts over (``loop=True``) or keeps returning the last
    snapshot.

    Parameters
    ----------
    snapshots
        Non-empty sequence of readings to replay, in order.
    loop
        Whether to restart from the beginning once exhausted.
    """

    def __init__(self, snapshots: Iterable[SensorSnapshot], loop: bool = False):
        self._snapshots: List[SensorSnapshot] = list(snapshots)
        if not self._snapshots:
            raise ValueError("ReplaySensorSource needs at least one snapshot")
        self._loop = loop
        self._idx = 0
        self._lock = threading.Lock()

    @property
    def reads(self) -> int:
        """Number of reads served so far."""
        with self._lock:
            return self._idx

    def read(self) -> SensorSnapshot:
        with self._lock:
            n = len(self._snapshots)
            if self._loop:
                snap = self._snapshots[self._idx % n]
            else:
                snap = self._snapshots[min(self._idx, n - 1)]
            self._idx += 1
            return snap
