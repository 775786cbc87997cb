from __future__ import annotations

import threading
from dataclasses import dataclass, field, fields, replace


@dataclass(frozen=True)
class StatsSnapshot:
    """
    Immutable copy of pipeline counters.

    Attributes
    ----------
    sensor_updates
        Readings applied to the shared vehicle state.
    sensor_errors
        Sensor reads that raised and were skipped.
    evaluator_ticks
        Evaluator ticks that ran against at least one reading.
    reports_enqueued
        Reports accepted by the queue on first enqueue.
    reports_dropped
        Reports rejected because the queue was full.
    deliveries_ok
        Successful transport sends.
    deliveries_failed
        Failed transport sends (including sends that raised).
    requeued
        Failed records put back into the queue.
    requeue_dropped
        Failed records lost because the queue was full at requeue time.
    """

    sensor_updates: int = 0
    sensor_errors: int = 0
    evaluator_ticks: int = 0
    reports_enqueued: int = 0
    reports_dropped: int = 0
    deliveries_ok: int = 0
    deliveries_failed: int = 0
    requeued: int = 0
    requeue_dropped: int = 0


COUNTER_NAMES = tuple(f.name for f in fields(StatsSnapshot))


@dataclass
class PipelineStats:
    """
    Thread-safe counters for observable pipeline events.

    Every worker thread increments its own counters; readers get a consistent
    :class:`StatsSnapshot`. Counting never changes control flow.
    """

    _counts: StatsSnapshot = field(default_factory=StatsSnapshot, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def incr(self, name: str, n: int = 1) -> None:
        """
        Increment counter ``name`` by ``n``.

        Raises
        ------
        KeyError
            If ``name`` is not a known counter.
        """
        if name not in COUNTER_NAMES:
            raise KeyError(name)
        with self._lock:
            self._counts = replace(self._counts, **{name: getattr(self._counts, name) + n})

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return self._counts
