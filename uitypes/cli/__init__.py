"""Command line interface for uitypes."""

from .lib import build_parser, main

__all__ = ["build_parser", "main"]
