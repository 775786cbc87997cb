"""
Stress tests for SharedVehicleState concurrency.

A writer applies readings whose fields are all derived from the update index,
while readers check that every snapshot is internally consistent (all fields
from the same update). A torn read would show a speed from one update with a
top speed or distance from another.

Notes
-----
Threading tests are probabilistic: they increase confidence but do not prove
the absence of races. Run multiple times for higher confidence.
"""

from __future__ import annotations

import math
import threading
from typing import List

import pytest

from vehicle_telemetry.core.state_store import SharedVehicleState
from vehicle_telemetry.domain.models import SensorSnapshot

UPDATES = 20_000


@pytest.mark.stress
def test_snapshots_are_never_torn() -> None:
    state = SharedVehicleState(tick_period_s=1.0, speed_time_unit_s=1.0, motion_threshold=0.5)
    start = threading.Barrier(5)  # 1 writer + 4 readers
    errors: List[BaseException] = []
    done = threading.Event()

    def writer() -> None:
        try:
            start.wait()
            for i in range(1, UPDATES + 1):
                # speed rises monotonically, so top_speed == speed == i
                state.update(SensorSnapshot(battery=float(i % 100), speed=float(i), temperature=float(i)))
        except BaseException as e:
            errors.append(e)
        finally:
            done.set()

    def reader() -> None:
        try:
            start.wait()
            prev_count = 0
            prev_distance = 0.0
            while not done.is_set():
                snap = state.snapshot()
                n = snap.update_count
                if n == 0:
                    continue
                assert snap.current.speed == float(n)
                assert snap.current.temperature == float(n)
                assert snap.top_speed == float(n)
                assert snap.is_moving is True
                assert math.isclose(snap.total_distance, n * (n + 1) / 2.0)
                assert n >= prev_count
                assert snap.total_distance >= prev_distance
                prev_count = n
                prev_distance = snap.total_distance
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert all(not t.is_alive() for t in threads), "A thread did not finish (possible deadlock)"
    if errors:
        raise AssertionError(f"Concurrency test caught exceptions: {errors!r}")
    assert state.snapshot().update_count == UPDATES
