"""
Logging setup for Dockyard.

All records go to stderr so that helper subcommands keep stdout for their
result line. Verbosity follows the ``-v`` count given on the command line.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .constants import LOG_FORMAT, LOG_DATE_FORMAT, PROGRAM_NAME


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)


def levels_for_verbosity(verbosity: int) -> tuple:
    """
    Map a ``-v`` count to (root level, dockyard level).

    Args:
        verbosity: Number of ``-v`` flags

    Returns:
        Tuple of logging levels
    """
    if verbosity <= 0:
        return logging.WARNING, logging.INFO
    if verbosity == 1:
        return logging.WARNING, logging.DEBUG
    if verbosity == 2:
        return logging.INFO, logging.DEBUG
    return logging.DEBUG, logging.DEBUG


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
) -> None:
    """
    Configure root and package loggers.

    Args:
        verbosity: Number of ``-v`` flags
        log_file: Optional file receiving the same records
        level: Explicit level name for the package logger (overrides
            the verbosity default when it is more verbose)
    """
    root_level, module_level = levels_for_verbosity(verbosity)
    if level:
        configured = logging.getLevelName(level.upper())
        if isinstance(configured, int):
            module_level = min(module_level, configured)

    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Cannot open log file {log_file}: {e}")

    root_logger.setLevel(root_level)
    logging.getLogger(PROGRAM_NAME).setLevel(module_level)
