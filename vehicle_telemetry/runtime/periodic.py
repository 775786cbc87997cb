from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class PeriodicTicker:
    """
    Fixed-rate tick scheduler driven by a stop event.

    Each call to :meth:`wait` sleeps until the next tick boundary. When a tick
    overruns its period the schedule restarts from "now" instead of firing a
    burst of catch-up ticks.

    Parameters
    ----------
    period_s
        Tick period in seconds. Must be positive.
    stop_event
        Shared stop signal. Waiting returns early as soon as it is set.
    clock
        Monotonic clock in seconds (injectable for tests).
    """

    def __init__(
        self,
        period_s: float,
        stop_event: threading.Event,
        clock: Callable[[], float] = time.monotonic,
    ):
        if period_s <= 0:
            raise ValueError(f"period_s must be > 0, got {period_s}")
        self._period = period_s
        self._stop = stop_event
        self._clock = clock
        self._next: Optional[float] = None

    @property
    def period_s(self) -> float:
        return self._period

    def wait(self) -> bool:
        """
        Sleep until the next tick boundary.

        Returns
        -------
        bool
            True if the caller should run another tick, False if stop was
            requested.
        """
        now = self._clock()
        if self._next is None:
            self._next = now
        self._next += self._period

        delay = self._next - now
        if delay < 0:
            self._next = now
            delay = 0.0
        return not self._stop.wait(delay)
