"""Structured logging configuration.

Configures the root logger with a structured format including timestamp,
level, and module name.  The log level is controlled by ``settings.LOG_LEVEL``.

Reflection text is user content and must never reach the logs; log ids
through :func:`mask_user_id` only.
"""

import logging
import sys

from app.core.config import settings

_NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "gotrue", "uvicorn.access")


def setup_logging() -> None:
    """Configure structured logging for the application.

    Sets the root logger level from ``settings.LOG_LEVEL`` and installs a
    single ``StreamHandler`` writing to *stdout*.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def mask_user_id(user_id: str) -> str:
    """Shorten a user id to its first 8 characters for log lines."""
    return f"{user_id[:8]}..."
