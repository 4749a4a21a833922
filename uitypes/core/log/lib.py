"""Core logging implementation for uitypes."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging"]

LOGGER_NAME = "uitypes"


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, as a number or a level name such as "DEBUG".
        stream: Output stream.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Names are placed under the project logger, so "composer" becomes
    "uitypes.composer".

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
