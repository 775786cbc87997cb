from __future__ import annotations

from typing import Any, Dict

from vehicle_telemetry.domain.models import ReportRecord


def build_report_payload(record: ReportRecord) -> Dict[str, Any]:
    """
    Build the JSON body sent to the remote collector for one report.

    Parameters
    ----------
    record
        Report to serialise.

    Returns
    -------
    dict
        JSON-safe payload with keys "type", "sensor", "distance_km",
        "top_speed_kmh", "timestamp_ms" and "triggers".
    """
    snap = record.snapshot
    return {
        "type": "vehicle_report",
        "sensor": {
            "battery_pct": snap.battery,
            "speed_kmh": snap.speed,
            "temperature_c": snap.temperature,
        },
        "distance_km": record.distance,
        "top_speed_kmh": record.top_speed,
        "timestamp_ms": record.timestamp_ms,
        "triggers": [t.value for t in record.triggers],
    }
