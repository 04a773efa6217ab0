"""Logging setup for the ``campus.canvas`` logger hierarchy."""

from __future__ import annotations

import logging

from .enums import LogLevel

ROOT_LOGGER = "campus.canvas"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: LogLevel | str = LogLevel.INFO) -> logging.Logger:
    """Apply ``level`` to the package loggers and attach a stream handler once.

    Args:
        level: Verbosity name or LogLevel

    Returns:
        The package root logger
    """
    log_level = LogLevel.parse(level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level.to_logging())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
