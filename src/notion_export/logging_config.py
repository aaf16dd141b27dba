"""Logging configuration for notion-export."""

import sys

from loguru import logger


def configure_logging(*, verbose: bool = False) -> None:
    """Configure loguru: one stderr sink, timestamps and DEBUG level when verbose."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format="{time:HH:mm:ss.SSS} {level.icon} {message}")
    else:
        logger.add(sys.stderr, level="INFO", format="{level.icon} {message}")
