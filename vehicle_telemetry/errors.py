"""Exception hierarchy for vehicle_telemetry."""

from __future__ import annotations

from typing import Optional


class TelemetryError(Exception):
    """Base exception for all vehicle_telemetry errors."""


class TelemetryConfigError(TelemetryError, ValueError):
    """Invalid configuration value."""


class TransportError(TelemetryError):
    """Delivery-level failure (network error, non-2xx response)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)
