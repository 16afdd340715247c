"""Logging setup for the CLI and the dashboard.

The level comes from the LOG_LEVEL environment variable (default INFO).
"""
from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def setup_logging(level: int | None = None) -> None:
    """Send every logger to stderr with a timestamped format.

    Safe to call more than once; existing handlers on the root logger are
    replaced.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level if level is not None else get_log_level())
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)
