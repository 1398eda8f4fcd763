"""Logging configuration utilities for happybatcher.

happybatcher is silent by default (its package logger only carries a
NullHandler). Applications that want to see batching activity opt in with
one of the helpers below.

Example usage:
    import happybatcher

    happybatcher.enable_console_logging(level="DEBUG")
    happybatcher.enable_file_logging("logs/batcher.log", max_bytes=5_000_000)
    happybatcher.enable_json_logging()
    happybatcher.configure_from_env()

Environment variables:
    HB_LOGGING: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    HB_LOG_FILE: Path to log file (enables rotating file logging)
    HB_LOG_JSON: Set to "1" for JSON output
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
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
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_BACKUP_COUNT = 5

LOGGER_NAME = "happybatcher"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Records logged with ``extra={"batcher": name}`` keep that name in a
    ``batcher`` field so flushes can be filtered per batcher downstream.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        batcher = getattr(record, "batcher", None)
        if batcher is not None:
            log_data["batcher"] = batcher
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _get_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


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
    """Log to stderr.

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
    """Log to a size-rotated file. Parent directories are created.

    Args:
        path: Log file location.
        level: Log level name or int.
        max_bytes: Rotate once the file reaches this size.
        backup_count: Rotated files to keep.
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


def enable_json_logging(
    level: LogLevel | int = "INFO",
    path: str | Path | None = None,
) -> logging.Handler:
    """Log JSON lines to stderr, or to a rotating file when ``path`` is given."""
    if path is None:
        handler: logging.Handler = logging.StreamHandler()
    else:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            path, maxBytes=DEFAULT_MAX_BYTES, backupCount=DEFAULT_BACKUP_COUNT
        )
    handler.setFormatter(JsonFormatter())
    _install(handler, level)
    return handler


def configure_from_env() -> None:
    """Configure logging from HB_LOGGING, HB_LOG_FILE and HB_LOG_JSON.

    Does nothing when neither HB_LOGGING nor HB_LOG_FILE is set.
    """
    level = os.environ.get("HB_LOGGING", "").upper()
    log_file = os.environ.get("HB_LOG_FILE", "")
    use_json = os.environ.get("HB_LOG_JSON", "") == "1"

    if not level and not log_file:
        return

    level = level or "INFO"

    if use_json:
        enable_json_logging(level=level, path=log_file or None)
    elif log_file:
        enable_file_logging(log_file, level=level)
    else:
        enable_console_logging(level=level)


def set_level(level: LogLevel | int) -> None:
    _get_logger().setLevel(_get_level(level))


def disable_logging() -> None:
    """Remove every handler except NullHandler and silence the package logger."""
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.CRITICAL + 1)
