"""Logging helpers for the command-line scripts.

The library modules only create loggers; handlers are installed here,
by the scripts that own the terminal.
"""

from __future__ import annotations

import logging
import sys


# SGR foreground codes; flagged entries log at DEBUG, species problems at WARNING
_LEVEL_STYLES: dict[int, str] = {
    logging.DEBUG: "32",
    logging.INFO: "36",
    logging.WARNING: "33",
    logging.ERROR: "31",
    logging.CRITICAL: "1;31",
}


class ColorFormatter(logging.Formatter):
    """Wraps each formatted record in the ANSI style of its level."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        style = _LEVEL_STYLES.get(record.levelno)
        if style is None:
            return text
        return f"\x1b[{style}m{text}\x1b[0m"


def setup_logger(verbose: bool = False) -> logging.Logger:
    """Configure the package logger to write colorized records to stderr."""
    logger = logging.getLogger("dsa_analyzer")
    level = logging.DEBUG if verbose else logging.WARNING
    if logger.handlers:
        logger.setLevel(level)
        return logger
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColorFormatter("%(levelname)s\t| %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
