"""Logging setup shared by the game engine and the command line tools."""

from __future__ import annotations

import datetime
import logging
import sys

LOGGER_NAME = "tetromino_rl"


class CustomFormatter(logging.Formatter):
    def format(self, record):
        dt = datetime.datetime.fromtimestamp(record.created)
        timestamp = dt.strftime('%Y-%m-%d %H:%M:%S')
        return f'[{timestamp}] {record.levelname.lower()}: {record.getMessage()}'


def setup_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure the package logger with a single stdout handler."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Remove default handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(CustomFormatter())
    logger.addHandler(console_handler)
    return logger


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)
