"""
Tests for the logging module.

These tests verify the custom logging levels, the formatters, the standalone
configuration and the pytest integration.
"""

import io
import logging
import re
from pathlib import Path
from unittest.mock import patch

import pytest

from ..logging import (
    FAIL_LEVEL,
    VERBOSE_LEVEL,
    ColorFormatter,
    HiveLogger,
    LogLevel,
    UTCFormatter,
    configure_logging,
    get_logger,
)


@pytest.fixture
def restore_root_logger():
    """Restore the handlers and level of the root logger after the test."""
    root_logger = logging.getLogger()
    # pytest attaches its own capture handlers per test phase, leave those alone
    original_handlers = [
        h for h in root_logger.handlers if not type(h).__module__.startswith("_pytest")
    ]
    original_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        if isinstance(handler.formatter, UTCFormatter) and handler not in original_handlers:
            handler.close()
            root_logger.removeHandler(handler)
    for handler in original_handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


class TestLoggerSetup:
    """Test the basic setup of loggers and custom levels."""

    def test_custom_levels_registered(self):
        """Test that custom log levels are properly registered."""
        assert logging.getLevelName(VERBOSE_LEVEL) == "VERBOSE"
        assert logging.getLevelName(FAIL_LEVEL) == "FAIL"
        assert logging.getLevelName("VERBOSE") == VERBOSE_LEVEL
        assert logging.getLevelName("FAIL") == FAIL_LEVEL

    def test_get_logger(self):
        """Test that get_logger returns a properly typed logger."""
        logger = get_logger("test_hive_logger_setup")
        assert isinstance(logger, HiveLogger)
        assert logger.name == "test_hive_logger_setup"

    def test_rpc_module_logger_is_typed(self):
        """The RPC modules log through the custom logger class."""
        from hive_rpc import rpc

        assert isinstance(rpc.logger, HiveLogger)


class TestHiveLogger:
    """Test the custom logger methods."""

    def setup_method(self):
        """Set up a logger and string stream for capturing log output."""
        self.log_output = io.StringIO()
        self.logger = get_logger("test_hive_logger")
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        handler = logging.StreamHandler(self.log_output)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        self.logger.addHandler(handler)
        self.logger.setLevel(logging.DEBUG)

    def test_verbose_method(self):
        """Test the verbose() method logs at the expected level."""
        self.logger.verbose("engine_newPayloadV3 request id=1")
        assert "VERBOSE: engine_newPayloadV3 request id=1" in self.log_output.getvalue()

    def test_fail_method(self):
        """Test the fail() method logs at the expected level."""
        self.logger.fail("This is a fail message")
        assert "FAIL: This is a fail message" in self.log_output.getvalue()

    def test_verbose_filtered_at_info(self):
        """Verbose messages are dropped when the logger is at INFO."""
        self.logger.setLevel(logging.INFO)
        self.logger.verbose("hidden")
        self.logger.info("shown")
        log_output = self.log_output.getvalue()
        assert "hidden" not in log_output
        assert "INFO: shown" in log_output


class TestFormatters:
    """Test the custom log formatters."""

    def test_utc_formatter(self):
        """Test that UTCFormatter formats timestamps correctly."""
        formatter = UTCFormatter(fmt="%(asctime)s: %(message)s")
        record = logging.makeLogRecord(
            {
                "msg": "Test message",
                "created": 1609459200.0,  # 2021-01-01 00:00:00 UTC
            }
        )
        formatted = formatter.format(record)
        assert re.match(r"2021-01-01 00:00:00\.\d{3}\+00:00: Test message", formatted)

    def test_color_formatter(self, monkeypatch):
        """Test that ColorFormatter adds color codes to the log level."""
        formatter = ColorFormatter(fmt="[%(levelname)s] %(message)s")
        record = logging.makeLogRecord(
            {
                "levelno": logging.ERROR,
                "levelname": "ERROR",
                "msg": "Error message",
            }
        )

        monkeypatch.setattr(ColorFormatter, "running_in_docker", False)
        assert "\033[31mERROR\033[0m" in formatter.format(record)

        monkeypatch.setattr(ColorFormatter, "running_in_docker", True)
        formatted = formatter.format(record)
        assert "\033[31mERROR\033[0m" not in formatted
        assert "ERROR" in formatted


@pytest.mark.parametrize(
    "value, expected",
    [
        ("info", logging.INFO),
        ("VERBOSE", VERBOSE_LEVEL),
        ("fail", FAIL_LEVEL),
        ("25", 25),
    ],
)
def test_log_level_from_cli(value: str, expected: int):
    """Level names and numbers are accepted on the command line."""
    assert LogLevel.from_cli(value) == expected


def test_log_level_from_cli_invalid():
    """Unknown level names are rejected."""
    with pytest.raises(ValueError, match="Invalid log level"):
        LogLevel.from_cli("loud")


class TestStandaloneConfiguration:
    """Test the standalone logging configuration function."""

    def test_configure_logging_defaults(self, restore_root_logger):
        """Test configure_logging with default parameters."""
        with patch("sys.stdout", new=io.StringIO()):
            handler = configure_logging()
            assert any(
                isinstance(h, logging.StreamHandler) for h in restore_root_logger.handlers
            )
            assert restore_root_logger.level == logging.INFO
            assert handler is None

    def test_configure_logging_with_file(self, restore_root_logger, tmp_path: Path):
        """Test configure_logging with file output."""
        log_file = tmp_path / "logs" / "client.log"
        handler = configure_logging(log_file=log_file, log_to_stdout=False)
        assert isinstance(handler, logging.FileHandler)
        assert log_file.exists()

        get_logger("test_config").info("Test log message")
        handler.flush()
        assert "Test log message" in log_file.read_text()

    def test_configure_logging_with_level(self, restore_root_logger):
        """Test configure_logging with custom log level."""
        configure_logging(log_level="DEBUG", log_to_stdout=False)
        assert restore_root_logger.level == logging.DEBUG

        configure_logging(log_level=VERBOSE_LEVEL, log_to_stdout=False)
        assert restore_root_logger.level == VERBOSE_LEVEL


class TestPytestIntegration:
    """Test the pytest integration of the logging module."""

    def test_pytest_configure(self, restore_root_logger, tmp_path: Path):
        """Test that pytest_configure sets up file logging from the command line options."""
        from pytest_plugins.logging import logging as logging_plugin

        log_file = tmp_path / "session.log"

        class MockConfig:
            def getoption(self, name):
                return {"hive_log_level": logging.DEBUG, "hive_log_file": log_file}[name]

        with patch("sys.stdout", new=io.StringIO()):
            logging_plugin.pytest_configure(MockConfig())
        try:
            assert restore_root_logger.level == logging.DEBUG
            assert logging_plugin.file_handler is not None
            log_path = Path(logging_plugin.file_handler.baseFilename)
            assert log_path.resolve() == log_file.resolve()
            assert logging_plugin.pytest_report_header(MockConfig()) == [
                f"Log file: {log_file}"
            ]
        finally:
            logging_plugin.file_handler = None
