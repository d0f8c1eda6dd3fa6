"""
Logging Configuration Module

The provider logs through loguru's global ``logger`` and never installs
handlers on import. Applications call ``configure_logging()`` once.

Usage:
    from lmstudio_provider.logging_config import configure_logging
    configure_logging()  # level from LOG_LEVEL
    configure_logging("DEBUG")  # explicit level wins over the environment

Environment Variables:
    LOG_LEVEL: Console log verbosity (default: INFO)
        - DEBUG: fragments, callbacks, option merging
        - INFO: one line per call
        - WARNING: warnings and errors only
        - ERROR: errors only
"""

import os
import sys

from loguru import logger


VALID_LOG_LEVELS: set[str] = {"DEBUG", "INFO", "WARNING", "ERROR"}

DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}"
)


def get_log_level(level: str | None = None) -> str:
    """
    Resolve the console log level.

    Args:
        level: Explicit level; ``LOG_LEVEL`` from the environment is used when omitted.

    Returns:
        str: DEBUG, INFO, WARNING or ERROR. Unknown values fall back to INFO.
    """
    candidate = (level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    if candidate not in VALID_LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return candidate


def configure_logging(level: str | None = None) -> int:
    """
    Replace loguru's default stderr sink with one filtered at the resolved level.

    Returns:
        int: The loguru handler id of the new sink.
    """
    resolved = get_log_level(level)

    logger.remove()
    handler_id = logger.add(sys.stderr, level=resolved, format=LOG_FORMAT, colorize=True)

    logger.debug(f"Logging configured: console level={resolved}")
    return handler_id
