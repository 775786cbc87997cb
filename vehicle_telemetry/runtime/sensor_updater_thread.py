from __future__ import annotations

import logging
import threading
from typing import Optional

from vehicle_telemetry.core.sensor_source import SensorSource
from vehicle_telemetry.core.state_store import SharedVehicleState
from vehicle_telemetry.core.stats import PipelineStats
from vehicle_telemetry.runtime.periodic import PeriodicTicker

logger = logging.getLogger("vehicle_telemetry.runtime.sensor")


class SensorUpdaterThread:
    """
    High-rate worker that feeds sensor readings into the shared state.

    Responsibilities
    ----------------
    - Pull one reading from the sensor source per tick.
    - Apply it to :class:`SharedVehicleState` (lock held only for the update).
    - Keep a fixed tick rate until the stop event is set.

    Concurrency Model
    -----------------
    The thread never touches the report queue and never waits on another
    worker. A failing sensor read is logged and the tick is skipped.

    Parameters
    ----------
    source
        Sensor source providing readings.
    state
        Shared vehicle state to update.
    stop_event
        Shared stop signal.
    period_s
        Tick period in seconds (0.01 = 100 Hz).
    stats
        Optional pipeline counters.
    """

    def __init__(
        self,
        source: SensorSource,
        state: SharedVehicleState,
        stop_event: threading.Event,
        period_s: float = 0.01,
        stats: Optional[PipelineStats] = None,
    ):
        self._source = source
        self._state = state
        self._stop = stop_event
        self._ticker = PeriodicTicker(period_s, stop_event)
        self._stats = stats
        self._thread = threading.Thread(target=self._run, name="sensor-updater", daemon=True)

    def start(self) -> None:
        """
        Start the worker thread if it is not already running.
        """
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        """
        Signal the worker thread to stop.
        """
        self._stop.set()

    def join(self, timeout: float | None = 2.0) -> None:
        self._thread.join(timeout=timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def step(self) -> bool:
        """
        Read one snapshot and apply it to the shared state.

        Returns
        -------
        bool
            True if the state was updated, False if the source raised.
        """
        try:
            reading = self._source.read()
        except Exception:
            logger.exception("[Sensor Thread] sensor read failed; skipping tick")
            if self._stats is not None:
                self._stats.incr("sensor_errors")
            return False

        self._state.update(reading)
        if self._stats is not None:
            self._stats.incr("sensor_updates")
        return True

    def _run(self) -> None:
        logger.info("[Sensor Thread] Started (%.0f Hz)", 1.0 / self._ticker.period_s)
        while not self._stop.is_set():
            self.step()
            if not self._ticker.wait():
                break
        logger.info("[Sensor Thread] Stopped")
