"""
Logging configuration for the property feed sync package.

This module provides centralized logging setup used by every component of
the sync. It configures a consistent log format and level for the whole
application and quiets the chattier third-party libraries.

Usage:
    from property_feed_sync.config.logging_config import setup_logging, get_logger

    # At application startup
    setup_logging()

    # In each module
    logger = get_logger(__name__)
    logger.info("Sync started")

Author: Leonardo Pacciani-Mori
License: MIT
"""

import logging
import sys
from typing import Optional


# =============================================================================
# FORMAT AND LEVELS
# =============================================================================

# Timestamp, logger name, level, message.
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_LOG_LEVEL = logging.INFO

# Loggers lowered to WARNING when suppress_third_party is set.
THIRD_PARTY_LOGGERS = [
    "urllib3",
    "urllib3.connectionpool",
    "requests",
    "pymongo",
    "PIL",
    "PIL.PngImagePlugin",
]


# =============================================================================
# SETUP AND ACCESS
# =============================================================================

def setup_logging(
    level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    suppress_third_party: bool = True
) -> None:
    """
    Configure the root logger used by the sync and its CLI.

    Sets up the root logger with a stdout handler and the shared format.
    Should be called once at startup, before the sync begins; later calls
    leave an already configured root logger untouched.

    Args:
        level: The logging level threshold. Defaults to INFO.
        log_format: The format string for log messages.
        date_format: The strftime format string for timestamps.
        suppress_third_party: If True, sets the HTTP, MongoDB and Pillow
            loggers to WARNING level to reduce noise.

    Example:
        >>> setup_logging(level=logging.DEBUG)
        >>> logger = get_logger(__name__)
        >>> logger.debug("Dictionary misses will now be shown")
    """
    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    if suppress_third_party:
        for logger_name in THIRD_PARTY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return the named logger; modules pass their own __name__.

    Args:
        name: Dotted logger name, e.g. "property_feed_sync.sync.batch".
            If None, returns the root logger.

    Returns:
        logging.Logger: A logger inheriting the root configuration.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing record 12345")
        2024-01-15 10:30:45 - property_feed_sync.sync.batch - INFO - Processing record 12345
    """
    return logging.getLogger(name)


def set_log_level(level: int, logger_name: Optional[str] = None) -> None:
    """
    Change the threshold of one logger subtree at runtime.

    Args:
        level: The new logging level to set.
        logger_name: Logger to adjust. None targets the root logger and
            therefore every logger without its own level.

    Example:
        >>> # Show dictionary misses only
        >>> set_log_level(logging.DEBUG, "property_feed_sync.dictionary")
    """
    logging.getLogger(logger_name).setLevel(level)
