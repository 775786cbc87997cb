from __future__ import annotations

import logging
import threading

from vehicle_telemetry.core.trigger.report_evaluator import ReportEvaluator
from vehicle_telemetry.runtime.periodic import PeriodicTicker

logger = logging.getLogger("vehicle_telemetry.runtime.evaluator")


class ReportEvaluatorThread:
    """
    Mid-rate worker that runs the report evaluator on a fixed period.

    The thread only schedules; trigger logic and enqueueing live in
    :class:`~vehicle_telemetry.core.trigger.report_evaluator.ReportEvaluator`.
    Exceptions from a tick are logged so one bad tick cannot kill the loop.

    Parameters
    ----------
    evaluator
        Evaluator run once per tick.
    stop_event
        Shared stop signal.
    period_s
        Tick period in seconds (0.1 = 10 Hz).
    """

    def __init__(
        self,
        evaluator: ReportEvaluator,
        stop_event: threading.Event,
        period_s: float = 0.1,
    ):
        self._evaluator = evaluator
        self._stop = stop_event
        self._ticker = PeriodicTicker(period_s, stop_event)
        self._thread = threading.Thread(target=self._run, name="report-evaluator", daemon=True)

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _run(self) -> None:
        logger.info("[Logic Thread] Started (every %.0f ms)", self._ticker.period_s * 1000.0)
        while not self._stop.is_set():
            try:
                self._evaluator.tick()
            except Exception:
                logger.exception("[Logic Thread] evaluation tick failed")
            if not self._ticker.wait():
                break
        logger.info("[Logic Thread] Stopped")
