"""
Logging setup for the `lightcss` command, using Loguru.

Library modules log with `from loguru import logger` and never touch sinks;
only the CLI calls `configure_logging()`.
"""

from __future__ import annotations

import sys

from loguru import logger

LOG_FORMAT = "<level>{level: <7}</level> │ <cyan>{name}</cyan> ║ <level>{message}</level>"

_VERBOSITY_LEVELS = {0: "WARNING", 1: "INFO"}


def level_for_verbosity(verbosity: int) -> str:
    """0 = warnings only, 1 = info, 2 or more = debug."""
    return _VERBOSITY_LEVELS.get(verbosity, "DEBUG")


def configure_logging(verbosity: int = 0) -> int:
    """Replace Loguru's default handler with a stderr sink. Returns the handler id."""
    logger.remove()
    return logger.add(sys.stderr, format=LOG_FORMAT, level=level_for_verbosity(verbosity))
