"""
Logging setup for the Dispatch Authorization Engine.

All modules log through child loggers of the "dispatch_engine" logger so a
host application can route them with a single handler.
"""

import logging

from dispatch_engine.app.core.config import settings

LOGGER_NAME = "dispatch_engine"

logger = logging.getLogger(LOGGER_NAME)


def get_logger(name: str) -> logging.Logger:
    """Return a child logger, e.g. get_logger("hierarchy") -> dispatch_engine.hierarchy."""
    return logger.getChild(name)


def configure_logging(level: str = None) -> None:
    """
    Attach a stream handler to the engine logger.
    
    Safe to call more than once; the handler is only added the first time.
    
    Args:
        level: Log level name, defaults to settings.log_level
    """
    logger.setLevel((level or settings.log_level).upper())
    
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ))
        logger.addHandler(handler)
