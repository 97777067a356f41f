"""Logging configuration for oneshot.

Application loggers at the configured level, HTTP and asyncio internals at WARNING.
"""

import logging
import sys
from typing import Literal

from oneshot.settings import get_settings

NOISY_LOGGERS = [
    "httpx",
    "httpcore",
    "asyncio",
]


def suppress_noisy_loggers() -> None:
    """Quiet third-party loggers."""
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
) -> None:
    """Configure application logging.

    Args:
        level: Override log level (defaults to settings.log_level)
    """
    log_level = level or get_settings().log_level

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, log_level))
    console_handler.setFormatter(
        logging.Formatter("%(levelname)s | %(name)s | %(message)s")
    )
    root_logger.addHandler(console_handler)

    logging.getLogger("oneshot").setLevel(getattr(logging, log_level))
    suppress_noisy_loggers()
