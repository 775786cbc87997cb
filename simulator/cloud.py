from __future__ import annotations

import logging
import random
import threading
from typing import Optional

from vehicle_telemetry.domain.models import ReportRecord, SendStatus

logger = logging.getLogger("simulator.cloud")


class SimulatedCloudTransport:
    """
    Stand-in for a remote collector with random latency and failures.

    Every :meth:`send` sleeps for a uniform delay in
    ``[min_delay_s, max_delay_s]`` and then succeeds with probability
    ``success_rate``.

    Parameters
    ----------
    min_delay_s, max_delay_s
        Latency bounds in seconds.
    success_rate
        Probability that a send succeeds (0..1).
    seed
        Seed for the private RNG.
    stop_event
        Optional stop signal. A set event cuts the simulated latency short
        and the in-flight send is reported as ``FAILURE``.
    """

    def __init__(
        self,
        min_delay_s: float = 1.0,
        max_delay_s: float = 10.0,
        success_rate: float = 0.9,
        seed: Optional[int] = None,
        stop_event: Optional[threading.Event] = None,
    ):
        if min_delay_s < 0 or max_delay_s < min_delay_s:
            raise ValueError("delays must satisfy 0 <= min_delay_s <= max_delay_s")
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be within [0, 1]")
        self._min = min_delay_s
        self._max = max_delay_s
        self._success_rate = success_rate
        self._rng = random.Random(seed)
        self._stop = stop_event or threading.Event()

    def send(self, record: ReportRecord) -> SendStatus:
        delay = self._rng.uniform(self._min, self._max)
        if self._stop.wait(delay):
            return SendStatus.FAILURE

        if self._rng.random() < self._success_rate:
            s = record.snapshot
            logger.info(
                "[CLOUD] Sent: Battery=%.1f%%, Speed=%.1f km/h, Temp=%.1f°C, Dist=%.2f km",
                s.battery,
                s.speed,
                s.temperature,
                record.distance,
            )
            return SendStatus.SUCCESS

        logger.info("[CLOUD] Send failed")
        return SendStatus.FAILURE
