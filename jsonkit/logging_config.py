"""
Logging Configuration
Attaches a console handler to the package logger for CLI and batch use
"""

import os
import logging
from typing import Optional, Union

from .models import LogLevel

PACKAGE_LOGGER = "jsonkit"

# Log format
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Union[LogLevel, str, int, None]) -> int:
    if level is None:
        level = os.getenv("JSONKIT_LOG_LEVEL", "INFO")
    if isinstance(level, LogLevel):
        level = level.value
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def configure_logging(level: Union[LogLevel, str, int, None] = None) -> logging.Logger:
    """
    Set up the jsonkit logger

    Args:
        level: LogLevel, level name or number; defaults to $JSONKIT_LOG_LEVEL, then INFO

    Returns:
        Configured logger
    """
    resolved = _resolve_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved)

    # Remove existing handlers to avoid duplicates
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(resolved)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    return logger

