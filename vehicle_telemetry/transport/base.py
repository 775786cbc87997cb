from __future__ import annotations

from typing import Protocol

from vehicle_telemetry.domain.models import ReportRecord, SendStatus


class CloudTransport(Protocol):
    """
    Protocol interface for report delivery to a remote collector.

    Any transport can be used if it provides a ``send(record)`` method with
    the correct signature. Latency and failure rate are implementation
    details; callers must treat both outcomes as always possible.

    Methods
    -------
    send(record)
        Attempt delivery of one report.
    """

    def send(self, record: ReportRecord) -> SendStatus:
        """
        Deliver one report.

        Parameters
        ----------
        record
            Report to deliver.

        Returns
        -------
        SendStatus
            ``SUCCESS`` if the collector accepted the report, else ``FAILURE``.
        """
        ...
