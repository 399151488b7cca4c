"""
Tests for logging setup.
"""

import json
import logging

import pytest
import structlog

from baud import logging as baud_logging
from baud.logging import get_logger, is_configured, setup_logging


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    setup_logging()


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_configured_after_import(self):
        """Loggers created at import time configure logging."""
        get_logger("test")
        assert is_configured()

    def test_level(self):
        """The root logger level follows the argument."""
        setup_logging("DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_lowercase_level(self):
        """Level names are case-insensitive."""
        setup_logging("error")
        assert logging.getLogger().level == logging.ERROR

    def test_replaces_own_handler(self):
        """Repeated setup keeps one handler of ours."""
        setup_logging()
        first = baud_logging._handler
        setup_logging()

        root = logging.getLogger()
        assert first not in root.handlers
        assert baud_logging._handler in root.handlers

    def test_json_to_file(self, tmp_path):
        """JSON output written to a log file."""
        log_file = tmp_path / "baud.log"
        setup_logging("INFO", json_output=True, log_file=str(log_file))

        get_logger("baud.test").info("Connected", host="bbs.example.com")
        baud_logging._handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "Connected"
        assert record["host"] == "bbs.example.com"
        assert record["level"] == "info"
        assert record["logger"] == "baud.test"

    def test_level_filters(self, tmp_path):
        """Records below the level are dropped."""
        log_file = tmp_path / "baud.log"
        setup_logging("WARNING", log_file=str(log_file))

        get_logger("baud.test").debug("hidden")
        get_logger("baud.test").warning("shown")
        baud_logging._handler.flush()

        text = log_file.read_text()
        assert "shown" in text
        assert "hidden" not in text


class TestGetLogger:
    """Tests for get_logger()."""

    def test_returns_bound_logger(self):
        """get_logger returns a structlog logger."""
        logger = get_logger("baud.test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "bind")

    def test_uses_structlog(self):
        """Loggers come from the structlog configuration."""
        setup_logging()
        assert structlog.is_configured()
