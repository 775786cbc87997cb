from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from vehicle_telemetry.domain.models import ReportRecord, SendStatus
from vehicle_telemetry.errors import TransportError
from vehicle_telemetry.transport.payload import build_report_payload

logger = logging.getLogger("vehicle_telemetry.transport.webhook")


@dataclass(frozen=True)
class WebhookConfig:
    """
    Configuration for webhook-based report delivery.

    Parameters
    ----------
    url
        Collector endpoint receiving the JSON report.
    timeout_s
        HTTP request timeout in seconds.
    verify_tls
        Whether to verify TLS certificates.
    auth_header
        Optional Authorization header value, passed through unchanged.
    """

    url: str
    timeout_s: float = 2.0
    verify_tls: bool = True
    auth_header: Optional[str] = None


class WebhookTransport:
    """
    Cloud transport that POSTs each report to an HTTP collector.

    Notes
    -----
    - This class performs side effects (network I/O).
    - Network errors and non-2xx responses are reported as ``FAILURE``;
      :meth:`post` raises :class:`TransportError` for callers that want the
      detail.
    """

    def __init__(self, cfg: WebhookConfig):
        self._cfg = cfg

    def post(self, record: ReportRecord) -> None:
        """
        POST one report.

        Raises
        ------
        TransportError
            On network failure or a non-2xx HTTP status.
        """
        headers = {"Content-Type": "application/json"}
        if self._cfg.auth_header:
            headers["Authorization"] = self._cfg.auth_header

        try:
            r = requests.post(
                self._cfg.url,
                json=build_report_payload(record),
                headers=headers,
                timeout=self._cfg.timeout_s,
                verify=self._cfg.verify_tls,
            )
        except requests.RequestException as e:
            raise TransportError(f"POST failed: {e!r}", endpoint=self._cfg.url) from e

        if not 200 <= r.status_code < 300:
            raise TransportError(
                f"collector returned HTTP {r.status_code}",
                status_code=r.status_code,
                endpoint=self._cfg.url,
            )

    def send(self, record: ReportRecord) -> SendStatus:
        try:
            self.post(record)
        except TransportError as e:
            logger.warning("[CLOUD] Send failed: %s", e)
            return SendStatus.FAILURE
        return SendStatus.SUCCESS
