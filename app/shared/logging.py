"""
Logging configuration for the screener service and its CLI.

One line per record: time, level, logger, message. The HTTP service
logs to stdout; the CLI logs to stderr so that its JSON output on
stdout stays machine-readable.

Logging must not change program behavior. Never log admin credentials,
session tokens or raw filing documents; log tickers, accessions and
counts instead.
"""

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO for this service.
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


def configure_logging(level: str = "INFO", stream: TextIO = sys.stdout) -> None:
    """Configure root logging for the application.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR). Unknown
            names fall back to INFO.
        stream: Where records are written.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=stream,
        force=True,
    )
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
