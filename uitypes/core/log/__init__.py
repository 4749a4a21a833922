"""Logging micro API for uitypes."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
