from __future__ import annotations

import logging

from vehicle_telemetry.core.config.yaml_config import LoggingConfig


def configure_logging(cfg: LoggingConfig) -> None:
    """
    Configure root logging once at process start.

    Parameters
    ----------
    cfg
        Level name (e.g. "INFO", "DEBUG") and record format.

    Raises
    ------
    ValueError
        If the level name is unknown.
    """
    level = logging.getLevelName(cfg.level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {cfg.level!r}")
    logging.basicConfig(level=level, format=cfg.format)
