from __future__ import annotations

import logging
import sys

"""Logging initialization with labeled prefixes.

Every line written by the tool is ``LABEL message`` on stdout, where LABEL is
one of TRACE|DEBUG|INFO|WARN|ERROR|SUMMARY.

This module provides:
- ラベル統一 (TRACE|DEBUG|INFO|WARN|ERROR|SUMMARY prefixes)
- standard library logging only, one handler on the ``xlsx2resx`` logger
- 冗長度切替: info (default), debug (-v / --debug), trace (-vv)

Module loggers are created with ``logging.getLogger(__name__)`` and are
children of the ``xlsx2resx`` logger, so they share its handler.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "set_level",
    "log_summary",
    "reset_logging",
    "SUMMARY_LEVEL",
    "TRACE_LEVEL",
]

LOGGER_NAME = "xlsx2resx"

# Custom SUMMARY level (between INFO=20 and WARNING=30)
SUMMARY_LEVEL = 25
# Custom TRACE level (below DEBUG=10), enabled with -vv
TRACE_LEVEL = 5

LEVELS_BY_NAME = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
}

# Global logger instance
_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Custom formatter that adds labeled prefixes to log messages.

    Labels:
    - TRACE: per-entry detail (found translations, glob patterns)
    - DEBUG: per-sheet / per-file detail
    - INFO: written files, watch events
    - WARN: keys missing from the neutral document, skipped sheets
    - ERROR: aborted conversions, failed writes
    - SUMMARY: the one-line run summary
    """

    LEVEL_LABELS = {
        TRACE_LEVEL: "TRACE",
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        # Get the appropriate label for the log level
        level_label = self.LEVEL_LABELS.get(record.levelno, record.levelname)

        # Format: LABEL message
        return f"{level_label} {record.getMessage()}"


def setup_logging() -> logging.Logger:
    """Setup logging with labeled prefixes for the application.

    Configures the ``xlsx2resx`` logger:
    - INFO level by default (see ``set_level``)
    - one stdout handler that passes everything down to TRACE; the logger
      level decides what is shown
    - no propagation to the root logger

    Idempotent: a second call returns the already configured logger.

    Returns:
        Configured logger instance for the application
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)

    # Clear any existing handlers to avoid duplication
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(TRACE_LEVEL)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate output
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured application logger.

    Returns:
        The configured logger instance. Calls setup_logging() if not already configured.
    """
    if _logger is None:
        return setup_logging()
    return _logger


def set_level(level: int | str) -> None:
    """Change the application log level.

    Args:
        level: ``info`` / ``debug`` / ``trace`` (case-insensitive, as used by
            the config file) or a numeric logging level

    Raises:
        KeyError: unknown level name
    """
    if isinstance(level, str):
        level = LEVELS_BY_NAME[level.lower()]
    get_logger().setLevel(level)


def log_summary(message: str) -> None:
    """Log a message at SUMMARY level.

    Convenience function for the end-of-run summary; the formatter adds the
    ``SUMMARY`` label.

    Args:
        message: The summary message to log (without the label)
    """
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Reset the global logger state. Mainly for testing purposes."""
    global _logger
    _logger = None
