"""Logging configuration for the alluvial diagram core."""

import sys
from typing import TextIO

from loguru import logger


def configure_logging(*, verbose: bool = False, sink: TextIO = sys.stderr) -> int:
    """Send log records from the ``alluvial`` package to ``sink``.

    Layout passes and network imports log at debug level, rejected
    operations as warnings. Returns the loguru handler id.
    """
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    return logger.add(sink, level=level, format="{level.icon} {message}", filter="alluvial")
