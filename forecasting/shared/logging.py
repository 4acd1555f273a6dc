"""
Logging configuration for the forecasting core.

Modules under `forecasting` only create module-level loggers. The CLI
`main` is the one caller of `configure_logging`; embedding hosts call it
themselves or keep their own handlers. Lines are pipe-separated on
stdout, which is why CLI JSON goes to `--output` files. The redis
client logger is held at WARNING so the cache falling back to memory
does not flood DEBUG output.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the process.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("redis").setLevel(logging.WARNING)
