"""
BigPdfMerge - Logging Module

Shared package logger. Services that want their own channel use
``logging.getLogger(__name__)``; everything else logs through ``logger``.
"""

import logging

from bigpdfmerge.config import LOG_FORMAT, LOG_LEVEL, LOGGER_NAME


def setup_logger(name: str = LOGGER_NAME, level: int = LOG_LEVEL) -> logging.Logger:
    """Create the application logger with a single stream handler.

    Calling this twice does not stack handlers.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        The configured logger
    """
    log = logging.getLogger(name)
    log.setLevel(level)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.propagate = False
    return log


logger = setup_logger()
