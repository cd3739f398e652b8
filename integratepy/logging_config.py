"""Logging helpers for integratepy.

integratepy logs under the "integratepy" logger and is silent by default
(the package installs a NullHandler). The integrator logs dispatch decisions
and failures at DEBUG level, so DEBUG is the useful level when diagnosing a
failing integral:

    import integratepy

    integratepy.enable_console_logging(level="DEBUG")
    integratepy.enable_file_logging("logs/integratepy.log")
    integratepy.enable_json_logging()
    integratepy.configure_from_env()

Environment variables read by configure_from_env():
    INTEGRATEPY_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    INTEGRATEPY_LOG_FILE: Path to a log file (enables rotating file logging)
    INTEGRATEPY_LOG_JSON: Set to "1" for JSON output
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
    "JsonFormatter",
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

LOGGER_NAME = "integratepy"

ENV_LEVEL = "INTEGRATEPY_LOGGING"
ENV_FILE = "INTEGRATEPY_LOG_FILE"
ENV_JSON = "INTEGRATEPY_LOG_JSON"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Example output:
        {"timestamp": "2024-01-15T10:30:00.123456+00:00", "level": "DEBUG",
         "logger": "integratepy.integrator", "message": "Kernel status 1: ..."}
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
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _attach(handler: logging.Handler, level: LogLevel | int, formatter: logging.Formatter) -> None:
    logger = _get_logger()
    logger.setLevel(_get_level(level))
    handler.setLevel(_get_level(level))
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Log integratepy records to stderr.

    Args:
        level: Log level name or int.
        format: Log message format string.
        date_format: Date format string for %(asctime)s.

    Returns:
        The created StreamHandler.
    """
    handler = logging.StreamHandler()
    _attach(handler, level, logging.Formatter(format, date_format))
    return handler


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    json_format: bool = False,
) -> RotatingFileHandler:
    """Log integratepy records to a size-rotated file.

    Args:
        path: Path to the log file. Parent directories are created.
        level: Log level name or int.
        max_bytes: Size at which the file is rotated. Default 10 MB.
        backup_count: Number of rotated files to keep.
        json_format: Write JSON records instead of plain text.

    Returns:
        The created RotatingFileHandler.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count)
    formatter = JsonFormatter() if json_format else logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT)
    _attach(handler, level, formatter)
    return handler


def enable_json_logging(level: LogLevel | int = "INFO") -> logging.StreamHandler:
    """Log integratepy records to stderr as JSON."""
    handler = logging.StreamHandler()
    _attach(handler, level, JsonFormatter())
    return handler


def configure_from_env() -> logging.Handler | None:
    """Configure logging from the INTEGRATEPY_* environment variables.

    Does nothing if neither INTEGRATEPY_LOGGING nor INTEGRATEPY_LOG_FILE is
    set. The level defaults to INFO when only a file is given.

    Returns:
        The handler that was added, or None.
    """
    level = os.environ.get(ENV_LEVEL, "").upper()
    log_file = os.environ.get(ENV_FILE, "")
    use_json = os.environ.get(ENV_JSON, "") == "1"

    if not level and not log_file:
        return None

    level = level or "INFO"
    if log_file:
        return enable_file_logging(log_file, level=level, json_format=use_json)
    if use_json:
        return enable_json_logging(level=level)
    return enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    """Set the level of the integratepy logger."""
    _get_logger().setLevel(_get_level(level))


def set_module_level(module: str, level: LogLevel | int) -> None:
    """Set the level for one submodule, e.g. set_module_level("bridge", "DEBUG")."""
    logging.getLogger(f"{LOGGER_NAME}.{module}").setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove all handlers and silence the integratepy logger."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
