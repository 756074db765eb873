"""Logging configuration for ganttplan with resolver-oriented verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30) - placements and renames
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - anchor candidates considered

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0  # Warnings and errors only
VERBOSITY_CHANGES = 1  # Final task placements, id renames
VERBOSITY_CHECKS = 2  # Every anchor the resolver looks at
VERBOSITY_DEBUG = 3  # Calendar walk details

_LEVELS = {
    VERBOSITY_SILENT: logging.WARNING,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class GanttplanLogger(logging.Logger):
    """Logger with semantic verbosity methods.

    - changes(): verbosity 1 - a task got its dates, an id was renamed
    - checks(): verbosity 2 - which dependency or fallback anchored a task
    - debug(): verbosity 3 - day-by-day calendar walk
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a schedule change (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log an anchor check (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> GanttplanLogger:
    """Return the shared ganttplan logger.

    Call setup_logger() first to attach a handler; until then only the
    root logger's handling applies.
    """
    logging.setLoggerClass(GanttplanLogger)
    logger = logging.getLogger("ganttplan")
    assert isinstance(logger, GanttplanLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the ganttplan logger for a verbosity level.

    Safe to call repeatedly; previous handlers are replaced.

    Args:
        verbosity: 0=warnings only, 1=changes, 2=checks, 3=debug
        stream: Output stream (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.WARNING))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    # Warnings keep their level name so they stand out among trace output
    handler.setFormatter(_VerbosityFormatter())
    logger.addHandler(handler)
    logger.propagate = False


class _VerbosityFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            return f"{record.levelname}: {message}"
        return message


def reset_logger() -> None:
    """Reset the logger to a clean state (used by tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True


def changes_enabled() -> bool:
    """True if changes-level messages will be emitted."""
    return get_logger().isEnabledFor(CHANGES_LEVEL)


def checks_enabled() -> bool:
    """True if checks-level messages will be emitted."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    """True if debug messages will be emitted."""
    return get_logger().isEnabledFor(logging.DEBUG)
