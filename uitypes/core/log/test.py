"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation under the project namespace."""
        logger = get_logger("test")
        assert logger.name == "uitypes.test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "uitypes"

    @pytest.mark.unit
    def test_get_logger_keeps_qualified_name(self) -> None:
        """Already qualified names are not prefixed twice."""
        assert get_logger("uitypes.composer").name == "uitypes.composer"

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """Verify logging setup accepts level names."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured,
        # so only the API contract is checked.
        assert logger.level == logging.NOTSET
