"""Logging configuration for the command line."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """Send duetrack log records to stderr at ``level``."""
    logger = logging.getLogger("duetrack")
    logger.setLevel(level.upper())

    # Remove handlers from a previous invocation in the same process
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
