"""
Unit tests for structured logging utilities.
"""

import json
import logging
from io import StringIO

import pytest

from docbridge.utils.logging import (
    JSONFormatter,
    LogContext,
    get_logger,
    log_error_with_context,
    log_file_annotated,
)


@pytest.fixture
def captured():
    """Attach a JSON handler to a fresh logger and yield (adapter, stream)."""
    logger = get_logger(f"test.{id(object())}")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    yield logger, stream
    logger.logger.removeHandler(handler)


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    logger = logging.getLogger("test.formatter")
    logger.setLevel(logging.INFO)

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    try:
        logger.info("Test message", extra={"file_path": "src/a.ts", "targets": 3})
    finally:
        logger.removeHandler(handler)

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.formatter"
    assert log_data["message"] == "Test message"
    assert log_data["file_path"] == "src/a.ts"
    assert log_data["context"] == {"targets": 3}
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", file_path="src/a.ts", phase="select")

    assert logger.extra["file_path"] == "src/a.ts"
    assert logger.extra["phase"] == "select"


def test_with_context_does_not_mutate_parent():
    """Test derived adapters carry merged context independently."""
    parent = get_logger("test_module", phase="select")
    child = parent.with_context(file_path="src/b.ts")

    assert child.extra == {"phase": "select", "file_path": "src/b.ts"}
    assert parent.extra == {"phase": "select"}


def test_log_context_restores_fields(captured):
    """Test LogContext adds fields only for the duration of the block."""
    logger, stream = captured

    with LogContext(logger, file_path="src/c.ts"):
        logger.info("inside")
    logger.info("outside")

    inside, outside = [json.loads(line) for line in stream.getvalue().splitlines()]
    assert inside["file_path"] == "src/c.ts"
    assert "file_path" not in outside


def test_log_file_annotated(captured):
    """Test per-file summary logging."""
    logger, stream = captured

    log_file_annotated(logger, "src/a.ts", targets=4, edits=2, duration_ms=1.234)

    log_data = json.loads(stream.getvalue())
    assert log_data["file_path"] == "src/a.ts"
    assert log_data["phase"] == "rewrite"
    assert log_data["context"]["targets"] == 4
    assert log_data["context"]["edits"] == 2
    assert log_data["context"]["duration_ms"] == 1.23


def test_log_error_with_context(captured):
    """Test error logging includes exception details."""
    logger, stream = captured

    try:
        raise ValueError("bad input")
    except ValueError as e:
        log_error_with_context(logger, "Failed", e, file_path="src/a.ts", language="typescript")

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert log_data["language"] == "typescript"
    assert log_data["error"]["type"] == "ValueError"
    assert log_data["error"]["message"] == "bad input"
    assert "Traceback" in log_data["error"]["stack_trace"]
