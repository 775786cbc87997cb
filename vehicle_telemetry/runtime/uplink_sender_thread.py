from __future__ import annotations

import logging
import threading
from typing import Optional

from vehicle_telemetry.core.report_queue import BoundedReportQueue
from vehicle_telemetry.core.stats import PipelineStats
from vehicle_telemetry.domain.models import ReportRecord, SendStatus
from vehicle_telemetry.transport.base import CloudTransport

logger = logging.getLogger("vehicle_telemetry.runtime.uplink")


class UplinkSenderThread:
    """
    Consumer worker that delivers queued reports through a cloud transport.

    Responsibilities
    ----------------
    - Take one record at a time from the bounded queue.
    - Hand it to the transport (synchronous, unbounded latency).
    - On failure put the same record back at the end of the queue, once.

    Delivery Semantics
    ------------------
    At-least-once *attempts* only: there is no retry limit, no backoff and no
    dead-letter path. If the queue is full when a failed record is requeued,
    the record is lost.

    Concurrency Model
    -----------------
    The queue never blocks. When it is empty the thread idles for
    ``poll_interval_s`` on the stop event, so stopping is immediate.

    Parameters
    ----------
    queue
        Bounded queue to drain.
    transport
        Delivery collaborator.
    stop_event
        Shared stop signal.
    poll_interval_s
        Idle time between polls of an empty queue.
    stats
        Optional pipeline counters.
    """

    def __init__(
        self,
        queue: BoundedReportQueue,
        transport: CloudTransport,
        stop_event: threading.Event,
        poll_interval_s: float = 0.1,
        stats: Optional[PipelineStats] = None,
    ):
        self._q = queue
        self._transport = transport
        self._stop = stop_event
        self._poll_interval_s = poll_interval_s
        self._stats = stats
        self._thread = threading.Thread(target=self._run, name="uplink-sender", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def step(self) -> Optional[SendStatus]:
        """
        Attempt delivery of the record at the front of the queue.

        Returns
        -------
        SendStatus or None
            Outcome of the attempt, or None if the queue was empty.
        """
        record = self._q.dequeue()
        if record is None:
            return None

        status = self._deliver(record)
        if status == SendStatus.SUCCESS:
            self._count("deliveries_ok")
            return status

        self._count("deliveries_failed")
        logger.warning("[Cloud] Send failed, retrying... (queued=%d)", self._q.size)
        if self._q.enqueue(record):
            self._count("requeued")
        else:
            logger.debug("[Cloud] Queue full; failed report dropped")
            self._count("requeue_dropped")
        return status

    def _deliver(self, record: ReportRecord) -> SendStatus:
        try:
            return self._transport.send(record)
        except Exception:
            logger.exception("[Cloud] transport raised")
            return SendStatus.FAILURE

    def _count(self, name: str) -> None:
        if self._stats is not None:
            self._stats.incr(name)

    def _run(self) -> None:
        logger.info("[Cloud Thread] Started")
        while not self._stop.is_set():
            if self.step() is None:
                self._stop.wait(self._poll_interval_s)
        logger.info("[Cloud Thread] Stopped")
