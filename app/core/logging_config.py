"""
Logging setup for the calendar service.

All modules log through children of the "calendar_service" logger,
e.g. logging.getLogger("calendar_service.services.oauth_flow").
configure_logging() attaches a single stdout handler to that tree.
"""

import logging
import sys


LOGGER_NAME = "calendar_service"

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the service logger tree.

    Safe to call more than once (the app factory runs per test);
    the handler is only attached the first time.

    Args:
        level: Level name such as "INFO" or "DEBUG"

    Returns:
        The root "calendar_service" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
