"""Centralized logging configuration for neorepl.

The REPL buffer is the user-facing output channel, so logging is meant for
diagnostics only: stale handles, host failures, handler bugs.

Usage:
    from neorepl.core.logging_config import configure_logging

    # Configure once at startup (CLI entry point or nvim plugin)
    configure_logging(level="DEBUG", format="json")

    # Modules use the standard pattern
    logger = logging.getLogger(__name__)

Environment Variables:
    NEOREPL_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    NEOREPL_LOG_FORMAT: Output format ("text" or "json")
    NEOREPL_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_FORMAT_WITH_MS = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes present on every LogRecord; anything else came in via extra=
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_configured = False


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one object per record:
    {
        "timestamp": "2026-01-04T10:12:00.123",
        "level": "WARNING",
        "logger": "neorepl.core.session",
        "message": "buffer 4 no longer valid",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    include_ms: bool = True,
    force: bool = False,
) -> None:
    """Configure logging for the application.

    Subsequent calls are ignored unless force=True. The nvim plugin host
    owns stdout/stdin for msgpack-rpc, so console output always goes to
    stderr.

    Args:
        level: Log level. Defaults to NEOREPL_LOG_LEVEL or "WARNING".
        format: Output format. Defaults to NEOREPL_LOG_FORMAT or "text".
        file_path: Optional file path. Defaults to NEOREPL_LOG_FILE.
        include_ms: Include milliseconds in timestamp.
        force: Force reconfiguration even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("NEOREPL_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("NEOREPL_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("NEOREPL_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        fmt = TEXT_FORMAT_WITH_MS if include_ms else TEXT_FORMAT
        formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True


def set_level(level: str, logger_name: str | None = None) -> None:
    """Set log level for a specific logger or the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        logger_name: Logger name. None for root logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper()))
