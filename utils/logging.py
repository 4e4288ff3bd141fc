"""
Logging Utility - Structured JSON Logging

Provides centralized, structured logging configuration for all backend components.
Supports JSON format for production and human-readable format for development.

Usage:
    from utils.logging import get_logger, setup_logging

    setup_logging(level="INFO", format_type="json")
    logger = get_logger(__name__)
    logger.info("User added", extra={"user_id": 1})
"""

import logging
import logging.config
from pathlib import Path
from typing import Any, Optional

import orjson

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS
    }


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = record.stack_info

        return orjson.dumps(payload, default=str).decode("utf-8")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__), None for the root logger

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    format_type: str = "json",
    output: str = "stdout",
    log_file: Optional[str] = None,
) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Log format ('json' or 'text')
        output: Log output ('stdout' or 'file')
        log_file: Target path when output is 'file'

    Raises:
        ValueError: If format_type or output is not recognised
    """
    if format_type not in ("json", "text"):
        raise ValueError(f"Unsupported log format: {format_type}")

    if output == "stdout":
        handler: dict[str, Any] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        }
    elif output == "file":
        if not log_file:
            raise ValueError("log_file is required when output is 'file'")
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "encoding": "utf-8",
        }
    else:
        raise ValueError(f"Unsupported log output: {output}")

    handler["formatter"] = format_type

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": TEXT_FORMAT},
                "json": {"()": JsonFormatter},
            },
            "handlers": {"default": handler},
            "root": {
                "handlers": ["default"],
                "level": level.upper(),
            },
        }
    )
