"""
Structured logging utilities with JSON formatting and context injection.

This module provides structured logging capabilities with:
- JSON formatted log output for machine-readable logs
- Context injection (file_path, phase, language) via LoggerAdapter
- Standardized log fields across all components
- Integration with Python's standard logging module
"""

import logging
import json
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, MutableMapping
from logging import LogRecord


_CONTEXT_FIELDS = ("file_path", "phase", "language")

_RESERVED_FIELDS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "exc_info", "exc_text", "stack_info",
    "taskName",
} | set(_CONTEXT_FIELDS)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON with standard fields:
    - timestamp: ISO 8601 formatted timestamp
    - level: Log level (INFO, WARNING, ERROR, etc.)
    - logger: Logger name
    - message: Log message
    - file_path / phase / language: processing context, when present
    - context: any other extra fields
    - error: Error details (when exception info is attached)
    """

    def format(self, record: LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in _CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        extra_fields = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_FIELDS
        }
        if extra_fields:
            log_data["context"] = extra_fields

        if record.exc_info:
            log_data["error"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "stack_trace": "".join(traceback.format_exception(*record.exc_info))
            }

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName
        }

        return json.dumps(log_data, default=str)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Usage:
        with LogContext(logger, file_path="src/a.ts", phase="select"):
            logger.info("Selecting declarations")
    """

    def __init__(self, logger: logging.LoggerAdapter, **context: Any):
        self.logger = logger
        self.context = context
        self.old_extra = None

    def __enter__(self) -> logging.LoggerAdapter:
        """Enter context and add fields to logger."""
        self.old_extra = self.logger.extra.copy() if self.logger.extra else {}
        self.logger.extra.update(self.context)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context and restore original logger state."""
        if self.old_extra is not None:
            self.logger.extra = self.old_extra


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that injects context fields into all log records.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        """Merge adapter context into the record's extra fields."""
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context: Any) -> "ContextLoggerAdapter":
        """
        Create a new logger adapter with additional context.

        Args:
            **context: Additional context fields

        Returns:
            New logger adapter with merged context
        """
        new_extra = self.extra.copy()
        new_extra.update(context)
        return ContextLoggerAdapter(self.logger, new_extra)


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    formatter = JSONFormatter()

    # stdout carries annotated source in the CLI, so logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)


def get_logger(name: str, **context: Any) -> ContextLoggerAdapter:
    """
    Get a context-aware logger for a module.

    Args:
        name: Logger name (typically __name__)
        **context: Initial context fields (file_path, phase, etc.)

    Returns:
        Context logger adapter

    Example:
        logger = get_logger(__name__, file_path="src/a.ts")
        logger.info("Annotating")  # Will include file_path
    """
    base_logger = logging.getLogger(name)
    return ContextLoggerAdapter(base_logger, context)


def log_file_annotated(
    logger: logging.LoggerAdapter,
    file_path: str,
    targets: int,
    edits: int,
    duration_ms: Optional[float] = None
) -> None:
    """
    Log a successfully annotated file with ledger sizes.

    Args:
        logger: Logger to use
        file_path: Path of the processed file
        targets: Number of declarations that received an inline comment
        edits: Number of splices applied besides the inline comments
        duration_ms: Processing duration in milliseconds (if available)
    """
    extra: Dict[str, Any] = {
        "file_path": file_path,
        "phase": "rewrite",
        "targets": targets,
        "edits": edits,
    }
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    logger.info(f"Annotated {file_path}", extra=extra)


def log_error_with_context(
    logger: logging.LoggerAdapter,
    message: str,
    error: Exception,
    **context: Any
) -> None:
    """
    Log error with full stack trace and context.

    Args:
        logger: Logger to use
        message: Error message
        error: Exception object
        **context: Additional context fields
    """
    logger.error(
        message,
        extra=context,
        exc_info=error
    )
