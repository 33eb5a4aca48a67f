"""Logging configuration utilities for queuesim.

The library is silent by default (a NullHandler is attached to the
``queuesim`` logger). Call one of the helpers below to see what the
engine is doing.

Example usage:
    import queuesim

    # Run start/stop and per-request transitions on stderr
    queuesim.enable_console_logging(level="DEBUG")

    # Rotating file logging for long sweeps
    queuesim.enable_file_logging("logs/sweep.log", max_bytes=10_000_000)

    # JSON lines for log aggregation
    queuesim.enable_json_logging()

    # Configure from environment variables
    queuesim.configure_from_env()

Environment variables:
    QS_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    QS_LOG_FILE: Path to log file (enables rotating file logging)
    QS_LOG_JSON: Set to "1" for JSON output
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5

LOGGER_NAME = "queuesim"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects.

    Example output:
        {"timestamp": "2024-01-15T10:30:00.123456+00:00", "level": "INFO",
         "logger": "queuesim.core.simulation", "message": "Simulation finished"}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def _get_level(level: str | int) -> int:
    """Convert a level string or int to a logging level constant."""
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    """Get the queuesim root logger."""
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    """Remove and close all handlers from the queuesim logger except NullHandler."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def _install(handler: logging.Handler, level: LogLevel | int) -> None:
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    handler.setLevel(_get_level(level))
    logger.addHandler(handler)


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Enable console (stderr) logging for queuesim.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created StreamHandler.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(format, date_format))
    _install(handler, level)
    return handler


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> RotatingFileHandler:
    """Enable rotating file logging for queuesim.

    DEBUG output of a long run is one line per request transition, so the
    file rotates once it reaches ``max_bytes``, keeping ``backup_count``
    old files.

    Args:
        path: Path to the log file. Parent directories are created automatically.
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.
        max_bytes: Maximum size of each log file in bytes. Default 10 MB.
        backup_count: Number of backup files to keep. Default 5.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created RotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    handler.setFormatter(logging.Formatter(format, date_format))
    _install(handler, level)
    return handler


def enable_json_logging(level: LogLevel | int = "INFO") -> logging.StreamHandler:
    """Enable JSON console logging for queuesim.

    Returns:
        The created StreamHandler with JsonFormatter.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    _install(handler, level)
    return handler


def configure_from_env() -> None:
    """Configure logging from QS_LOGGING, QS_LOG_FILE and QS_LOG_JSON.

    Does nothing when neither a level nor a file is set.
    """
    level = os.environ.get("QS_LOGGING", "").upper()
    log_file = os.environ.get("QS_LOG_FILE", "")
    use_json = os.environ.get("QS_LOG_JSON", "") == "1"

    if not level and not log_file:
        return

    level = level or "INFO"

    if log_file:
        handler = enable_file_logging(log_file, level=level)
        if use_json:
            handler.setFormatter(JsonFormatter())
    elif use_json:
        enable_json_logging(level=level)
    else:
        enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    """Set the global log level for queuesim."""
    _get_logger().setLevel(_get_level(level))


def set_module_level(module: str, level: LogLevel | int) -> None:
    """Set the log level for a specific queuesim submodule.

    Args:
        module: Module name relative to queuesim (e.g., "core.simulation").
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or int.

    Example:
        >>> import queuesim
        >>> queuesim.enable_console_logging(level="INFO")
        >>> queuesim.set_module_level("core.simulation", "DEBUG")
    """
    full_name = f"{LOGGER_NAME}.{module}"
    logging.getLogger(full_name).setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove all handlers and silence the queuesim logger."""
    logger = _get_logger()
    _clear_handlers()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
