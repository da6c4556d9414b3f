"""Console logging for the thorn command line."""

from __future__ import annotations

import logging
import sys
from typing import TextIO


class _ConsoleFormatter(logging.Formatter):
    """Print progress messages bare and prefix warnings with their level."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            return f"{record.levelname}: {message}"
        return message


def setup_logging(level: int = logging.INFO, *, stream: TextIO | None = None) -> None:
    """Install the console handler on the ``thorn`` logger.

    Call this once, before the first message is logged. Calling it again
    replaces the handler instead of adding a second one.
    """

    logger = logging.getLogger("thorn")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_ConsoleFormatter())
    logger.addHandler(handler)
