from __future__ import annotations

import logging
import sys
import time
from typing import List, Optional

from vehicle_telemetry.bootstrap import build_pipeline
from vehicle_telemetry.logging_setup import configure_logging

logger = logging.getLogger("vehicle_telemetry")


def _arg_value(argv: List[str], flag: str) -> Optional[str]:
    if flag in argv:
        i = argv.index(flag)
        if i + 1 < len(argv):
            return argv[i + 1]
    return None


def main(argv: Optional[List[str]] = None) -> None:
    """
    Run the telemetry pipeline until Ctrl-C or the requested duration.

    Notes
    -----
    - Loads configuration from `config.yaml` by default.
    - Optional CLI usage:
        python -m vehicle_telemetry.dev.run_pipeline --config path/to/config.yaml --duration 30
    """
    args = sys.argv[1:] if argv is None else argv
    config_path = _arg_value(args, "--config")
    duration = _arg_value(args, "--duration")
    duration_s = float(duration) if duration is not None else None

    wiring = build_pipeline(config_path=config_path)
    configure_logging(wiring.config.logging)

    logger.info("=== Vehicle Sensor Monitoring System ===")
    wiring.runtime.start()

    started = time.monotonic()
    try:
        while wiring.runtime.is_running():
            if duration_s is not None and time.monotonic() - started >= duration_s:
                logger.info("Duration reached (%.1fs) - stopping", duration_s)
                break
            time.sleep(0.2)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        wiring.runtime.stop()
        logger.info("Final stats: %s", wiring.runtime.stats)


if __name__ == "__main__":
    main()
