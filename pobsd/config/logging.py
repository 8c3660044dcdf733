"""Logging setup for the `pobsd-query` entry point.

Library modules only create module loggers; handlers, format and level are decided here, once,
by whoever runs the process.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are noisy below WARNING.
_QUIET_LOGGERS = ("dateparser", "tzlocal")


def resolve_log_level(level: str | None = None) -> str:
    """Return the level name to use: `level`, else `LOG_LEVEL`, else `INFO`."""

    return (level or os.getenv("LOG_LEVEL") or "INFO").strip().upper()


def configure_logging(level: str | None = None) -> None:
    """Send logs to stderr so that stdout only carries query output."""

    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT, stream=sys.stderr)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
