"""
Logging utilities

Shared logger setup; the level comes from Settings.LOG_LEVEL.
"""

import logging
from jalpan.core.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Create a module logger

    Reuses the LOG_LEVEL setting from core/config.py.

    Args:
        name: logger name

    Returns:
        logging.Logger: configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        # configure only when no handler is attached yet
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    return logger
