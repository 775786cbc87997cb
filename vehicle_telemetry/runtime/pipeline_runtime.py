from __future__ import annotations

import logging
import threading

from vehicle_telemetry.core.stats import PipelineStats, StatsSnapshot
from vehicle_telemetry.runtime.report_evaluator_thread import ReportEvaluatorThread
from vehicle_telemetry.runtime.sensor_updater_thread import SensorUpdaterThread
from vehicle_telemetry.runtime.uplink_sender_thread import UplinkSenderThread

logger = logging.getLogger("vehicle_telemetry.runtime")


class PipelineRuntime:
    """
    Thread supervisor for the three pipeline stages.

    This class owns:
    - the shared stop event
    - worker thread lifecycles (start/stop/join)

    Thread Topology
    ---------------
    1) SensorUpdaterThread (high rate)
       - reads the sensor source
       - updates SharedVehicleState

    2) ReportEvaluatorThread (mid rate)
       - snapshots SharedVehicleState
       - runs trigger rules, enqueues reports into BoundedReportQueue

    3) UplinkSenderThread (consumer)
       - drains BoundedReportQueue through the cloud transport
       - requeues failed reports

    Notes
    -----
    - Workers share nothing but the state store and the queue; none of them
      waits on another.
    - All threads are daemon threads; `stop()` + `join()` are still used for
      clean shutdown.

    Parameters
    ----------
    sensor
        Sensor updater worker.
    evaluator
        Report evaluator worker.
    uplink
        Uplink sender worker.
    stop_event
        Stop signal shared by all three workers (and any transport that
        supports interruption).
    stats
        Counters shared by the workers.
    """

    def __init__(
        self,
        sensor: SensorUpdaterThread,
        evaluator: ReportEvaluatorThread,
        uplink: UplinkSenderThread,
        stop_event: threading.Event,
        stats: PipelineStats,
    ):
        self._sensor = sensor
        self._evaluator = evaluator
        self._uplink = uplink
        self._stop = stop_event
        self._stats = stats

    @property
    def stop_event(self) -> threading.Event:
        return self._stop

    @property
    def stats(self) -> StatsSnapshot:
        return self._stats.snapshot()

    def is_running(self) -> bool:
        return any(w.is_alive() for w in (self._sensor, self._evaluator, self._uplink))

    def start(self) -> None:
        """
        Start all worker threads.

        Notes
        -----
        Threads are started producer first:
        - sensor updater (so state is populated)
        - evaluator (reads state, fills the queue)
        - uplink sender (drains the queue)
        """
        logger.info("Starting vehicle telemetry pipeline")
        self._sensor.start()
        self._evaluator.start()
        self._uplink.start()

    def stop(self, timeout: float = 2.0) -> None:
        """
        Stop all worker threads and wait briefly for shutdown.

        Parameters
        ----------
        timeout
            Per-thread join timeout in seconds.
        """
        self._stop.set()
        for worker in (self._sensor, self._evaluator, self._uplink):
            worker.join(timeout=timeout)
            if worker.is_alive():
                logger.warning("Worker %r did not stop within %.1fs", worker, timeout)
        logger.info("Pipeline stopped")
