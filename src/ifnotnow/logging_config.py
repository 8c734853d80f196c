"""Logging setup for the ifnotnow CLI."""

import sys

from loguru import logger

from ifnotnow.config import LOG_FORMAT


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send loguru output to stderr, keeping stdout for rendered outlines.

    ``verbose`` wins over ``quiet`` when both are set.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    logger.debug("Logging at {} level", level)
