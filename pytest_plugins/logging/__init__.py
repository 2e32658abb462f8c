"""Logging configuration and custom log levels for the Engine API client."""

from .logging import (
    FAIL_LEVEL,
    VERBOSE_LEVEL,
    ColorFormatter,
    HiveLogger,
    LogLevel,
    UTCFormatter,
    configure_logging,
    get_logger,
)

__all__ = (
    "FAIL_LEVEL",
    "VERBOSE_LEVEL",
    "ColorFormatter",
    "HiveLogger",
    "LogLevel",
    "UTCFormatter",
    "configure_logging",
    "get_logger",
)
