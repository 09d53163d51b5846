"""Logging setup for the skycast service."""

import logging
import sys
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"

# Upstream clients log every request line; the fetchers log their own.
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Send skycast logs to stdout at ``level`` (LOG_LEVEL by default).

    SQL statements are only shown when DEBUG is on.
    """
    log_level = (level or settings.LOG_LEVEL).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    app_logger = logging.getLogger("skycast")
    app_logger.setLevel(log_level)
    if not any(getattr(h, "stream", None) is sys.stdout for h in app_logger.handlers):
        app_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if settings.DEBUG:
        sql_logger = logging.getLogger("sqlalchemy.engine")
        sql_logger.setLevel(logging.INFO)
        sql_logger.addHandler(handler)

    app_logger.info(f"Logging configured - level {log_level}")
