"""Logger setup for the ``provtip`` namespace."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "provtip"


def setup_logging(level: int = logging.WARNING, stream: Optional[TextIO] = None) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Calling it again replaces the previous handler instead of stacking them.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.debug("Logging initialized at %s", logging.getLevelName(level))
    return logger
