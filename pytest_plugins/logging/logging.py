"""
A Pytest plugin to configure logging for Engine API test sessions.

Note: pytest's builtin logging does not write timestamps when log output is written to
pytest's caplog (the captured output for a test). That output is shown in the `FAILURES`
summary section, which is what ends up in the hive simulator log, and timestamps are
needed there to line up the client requests against the client's own log.

This module provides both:
1. A standalone logging configuration usable by the client library outside of pytest
2. A pytest plugin that configures logging for the test session
"""

import logging
import sys
from datetime import datetime, timezone
from logging import LogRecord
from pathlib import Path
from typing import Any, ClassVar, Optional, Union, cast

import pytest

file_handler: Optional[logging.FileHandler] = None

# Custom log levels
VERBOSE_LEVEL = 15  # Between DEBUG (10) and INFO (20)
FAIL_LEVEL = 35  # Between WARNING (30) and ERROR (40)

logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")
logging.addLevelName(FAIL_LEVEL, "FAIL")


class HiveLogger(logging.Logger):
    """Logger with the `verbose` and `fail` levels used by the RPC client."""

    def verbose(
        self,
        msg: object,
        *args: Any,
        exc_info: Union[BaseException, bool, None] = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Log a message with VERBOSE level severity (15).

        Used for one line per request sent to the client; request and response bodies
        are logged at DEBUG.
        """
        if self.isEnabledFor(VERBOSE_LEVEL):
            self._log(VERBOSE_LEVEL, msg, args, exc_info, extra, stack_info, stacklevel)

    def fail(
        self,
        msg: object,
        *args: Any,
        exc_info: Union[BaseException, bool, None] = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log a message with FAIL level severity (35)."""
        if self.isEnabledFor(FAIL_LEVEL):
            self._log(FAIL_LEVEL, msg, args, exc_info, extra, stack_info, stacklevel)


logging.setLoggerClass(HiveLogger)


def get_logger(name: str) -> HiveLogger:
    """Get a properly-typed logger with the custom logging levels."""
    return cast(HiveLogger, logging.getLogger(name))


logger = get_logger(__name__)


class UTCFormatter(logging.Formatter):
    """Log formatter that formats UTC timestamps with milliseconds and +00:00 suffix."""

    def formatTime(self, record, datefmt=None):  # noqa: D102,N802  # camelcase required
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3] + "+00:00"


class ColorFormatter(UTCFormatter):
    """Formatter that adds ANSI color codes to log level names for terminal output."""

    running_in_docker: ClassVar[bool] = Path("/.dockerenv").exists()

    COLORS = {
        logging.DEBUG: "\033[37m",  # Gray
        VERBOSE_LEVEL: "\033[36m",  # Cyan
        logging.INFO: "\033[36m",  # Cyan
        logging.WARNING: "\033[33m",  # Yellow
        FAIL_LEVEL: "\033[35m",  # Magenta
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[41m",  # Red background
    }
    RESET = "\033[0m"

    def format(self, record: LogRecord) -> str:
        """Apply colorful formatting only when not running in Docker."""
        record_copy = logging.makeLogRecord(record.__dict__)
        if not self.running_in_docker:
            color = self.COLORS.get(record_copy.levelno, self.RESET)
            record_copy.levelname = f"{color}{record_copy.levelname}{self.RESET}"
        return super().format(record_copy)


class LogLevel:
    """Help parse a log-level provided on the command-line."""

    @classmethod
    def from_cli(cls, value: str) -> int:
        """
        Parse a logging level from CLI.

        Accepts standard level names (e.g. 'INFO', 'debug', 'verbose') or numeric values.
        """
        try:
            return int(value)
        except ValueError:
            pass

        level_name = value.upper()
        if level_name in logging._nameToLevel:
            return logging._nameToLevel[level_name]

        valid = ", ".join(logging._nameToLevel.keys())
        raise ValueError(f"Invalid log level '{value}'. Expected one of: {valid} or a number.")


def configure_logging(
    log_level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_to_stdout: bool = True,
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    use_color: Optional[bool] = None,
) -> Optional[logging.FileHandler]:
    """
    Configure the root logger with the custom levels and formatters.

    Args:
        log_level: The logging level to use (name or numeric value)
        log_file: Path to the log file (if None, no file logging is set up)
        log_to_stdout: Whether to log to stdout
        log_format: The log format string
        use_color: Whether to use colors in stdout output (auto-detected if None)

    Returns:
        The file handler if log_file is provided, otherwise None

    """
    root_logger = logging.getLogger()

    if isinstance(log_level, str):
        log_level = LogLevel.from_cli(log_level)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_handler_instance = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)

        file_handler_instance = logging.FileHandler(log_path, mode="w")
        file_handler_instance.setFormatter(UTCFormatter(fmt=log_format))
        root_logger.addHandler(file_handler_instance)

    if log_to_stdout:
        stream_handler = logging.StreamHandler(sys.stdout)
        if use_color is None:
            use_color = not ColorFormatter.running_in_docker
        if use_color:
            stream_handler.setFormatter(ColorFormatter(fmt=log_format))
        else:
            stream_handler.setFormatter(UTCFormatter(fmt=log_format))
        root_logger.addHandler(stream_handler)

    logger.verbose("Logging configured successfully.")
    return file_handler_instance


# ==============================================================================
# Pytest plugin integration
# ==============================================================================


def pytest_addoption(parser):  # noqa: D103
    logging_group = parser.getgroup(
        "hive logging", "Arguments related to logging of the Engine API client."
    )
    logging_group.addoption(
        "--hive-log-level",  # --log-level is defined by pytest's built-in logging
        action="store",
        default="INFO",
        type=LogLevel.from_cli,
        dest="hive_log_level",
        help=(
            "The logging level to use in the test session: DEBUG, VERBOSE, INFO, WARNING, "
            "ERROR or CRITICAL, default - INFO. An integer in [0, 50] may be also provided."
        ),
    )
    logging_group.addoption(
        "--hive-log-file",
        action="store",
        default=None,
        type=Path,
        dest="hive_log_file",
        help="Also write the session log to this file.",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:
    """Initialize logging for the pytest session."""
    global file_handler

    file_handler = configure_logging(
        log_level=config.getoption("hive_log_level"),
        log_file=config.getoption("hive_log_file"),
        log_to_stdout=True,
    )


def pytest_report_header(config: pytest.Config) -> list[str]:
    """Show the log file path in the test session header."""
    if hive_log_file := config.getoption("hive_log_file"):
        return [f"Log file: {hive_log_file}"]
    return []


def log_only_to_file(level: int, msg: str, *args) -> None:
    """Log a message only to the file handler, bypassing stdout."""
    if not file_handler:
        return
    plugin_logger = logging.getLogger(__name__)
    if not plugin_logger.isEnabledFor(level):
        return
    record: LogRecord = plugin_logger.makeRecord(
        plugin_logger.name,
        level,
        fn=__file__,
        lno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )
    file_handler.handle(record)


def pytest_runtest_logreport(report: pytest.TestReport) -> None:
    """Log test status and duration to file after it runs."""
    if report.when != "call":
        return

    log_level = logging.INFO
    if report.skipped:
        status = "SKIPPED"
    elif report.failed:
        status = "FAILED"
        log_level = FAIL_LEVEL
    else:
        status = "PASSED"

    log_only_to_file(log_level, f"{status} in {report.duration:.2f}s: {report.nodeid}")
