"""
Bounded report queue.

Fixed-capacity FIFO of :class:`~vehicle_telemetry.domain.models.ReportRecord`
shared by the report evaluator (producer) and the uplink sender (consumer).

Backpressure Policy
-------------------
Neither operation ever blocks. ``enqueue`` on a full queue is rejected and
the caller decides whether to drop or log; ``dequeue`` on an empty queue
returns ``None`` and the consumer polls again later.

Ordering
--------
Records come out in the order they were accepted. A failed delivery is
re-enqueued at the back, behind anything accepted in the meantime, so
delivery order after a failure is not the original arrival order.
"""

from __future__ import annotations

import threading
from typing import List, Optional

from vehicle_telemetry.domain.models import ReportRecord

DEFAULT_CAPACITY = 1000


class BoundedReportQueue:
    """
    Lock-guarded circular buffer with reject-when-full semantics.

    The buffer is allocated once at construction (``capacity`` slots) and is
    addressed through a head index and an element count, so both operations
    are constant time and the queue never grows.

    Parameters
    ----------
    capacity
        Maximum number of records held at once. Must be at least 1.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._slots: List[Optional[ReportRecord]] = [None] * capacity
        self._head = 0
        self._count = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        with self._lock:
            return self._count

    def __len__(self) -> int:
        return self.size

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return self._count == 0

    @property
    def is_full(self) -> bool:
        with self._lock:
            return self._count >= self._capacity

    def enqueue(self, record: ReportRecord) -> bool:
        """
        Append a record at the back of the queue.

        Parameters
        ----------
        record
            Record to append. Ownership passes to the queue on success.

        Returns
        -------
        bool
            True if the record was accepted, False if the queue was full
            (the queue is left unchanged).
        """
        with self._lock:
            if self._count >= self._capacity:
                return False
            tail = (self._head + self._count) % self._capacity
            self._slots[tail] = record
            self._count += 1
            return True

    def dequeue(self) -> Optional[ReportRecord]:
        """
        Remove and return the record at the front of the queue.

        Returns
        -------
        ReportRecord or None
            Front record, or None if the queue is empty.
        """
        with self._lock:
            if self._count == 0:
                return None
            record = self._slots[self._head]
            self._slots[self._head] = None
            self._head = (self._head + 1) % self._capacity
            self._count -= 1
            return record
