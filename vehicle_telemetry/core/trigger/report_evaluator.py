"""
Report evaluator.

Turns the shared vehicle state into outbound reports. On each tick the
evaluator:

1) takes one consistent snapshot of the shared state,
2) runs every trigger rule against it (no short-circuit, so each rule's
   bookkeeping advances independently),
3) if at least one rule fired, builds exactly one :class:`ReportRecord`
   from the snapshot and offers it to the bounded queue.

A full queue drops the record with a warning. Rule bookkeeping is not rolled
back in that case; the report counts as sent.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from vehicle_telemetry.core.report_queue import BoundedReportQueue
from vehicle_telemetry.core.state_store import SharedVehicleState
from vehicle_telemetry.core.stats import PipelineStats
from vehicle_telemetry.core.trigger.trigger_base import TriggerContext, TriggerDecision, TriggerRule
from vehicle_telemetry.domain.models import ReportRecord

logger = logging.getLogger("vehicle_telemetry.evaluator")

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Monotonic clock in whole milliseconds."""
    return time.monotonic_ns() // 1_000_000


class ReportEvaluator:
    """
    Stateful trigger evaluation over the shared vehicle state.

    Parameters
    ----------
    state
        Shared vehicle state to read from.
    queue
        Bounded queue receiving built reports.
    rules
        Trigger rules evaluated on every tick, in order.
    clock
        Millisecond clock used for the tick timestamp. Defaults to
        :func:`monotonic_ms`.
    stats
        Optional counters updated on every tick.
    """

    def __init__(
        self,
        state: SharedVehicleState,
        queue: BoundedReportQueue,
        rules: Sequence[TriggerRule],
        clock: Clock = monotonic_ms,
        stats: Optional[PipelineStats] = None,
    ):
        self._state = state
        self._queue = queue
        self._rules = list(rules)
        self._clock = clock
        self._stats = stats

    @property
    def rules(self) -> List[TriggerRule]:
        return list(self._rules)

    def tick(self, now_ms: Optional[int] = None) -> Optional[ReportRecord]:
        """
        Run one evaluation cycle.

        Parameters
        ----------
        now_ms
            Optional timestamp for this cycle. If None, reads the clock.

        Returns
        -------
        ReportRecord or None
            The report built on this tick (whether or not the queue accepted
            it), or None if no rule fired.
        """
        snap = self._state.snapshot()
        if snap.update_count == 0:
            # Nothing has been read yet; the zeroed state is not a real reading.
            return None

        ts = self._clock() if now_ms is None else now_ms
        ctx = TriggerContext(now_ms=ts)
        if self._stats is not None:
            self._stats.incr("evaluator_ticks")

        decisions: List[TriggerDecision] = [rule.evaluate(snap, ctx) for rule in self._rules]
        fired = [d for d in decisions if d.fired]
        if not fired:
            return None

        for d in fired:
            logger.info("[Logic] %s", d.message or d.kind.value)

        record = ReportRecord(
            snapshot=snap.current,
            distance=snap.total_distance,
            top_speed=snap.top_speed,
            timestamp_ms=ts,
            triggers=tuple(d.kind for d in fired),
        )

        if self._queue.enqueue(record):
            if self._stats is not None:
                self._stats.incr("reports_enqueued")
        else:
            logger.warning("[Logic] Warning: Queue full! Dropping report (capacity=%d)", self._queue.capacity)
            if self._stats is not None:
                self._stats.incr("reports_dropped")

        return record
