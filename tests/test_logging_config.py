"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging

from plancore.logging_config import JSONFormatter, get_logger, setup_logging


def _record(msg="hello %s", args=("world",), level=logging.INFO, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=level, pathname="test.py",
        lineno=1, msg=msg, args=args, exc_info=exc_info
    )


def test_json_formatter_outputs_valid_json():
    parsed = json.loads(JSONFormatter().format(_record()))
    assert parsed["message"] == "hello world"
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test"
    assert "timestamp" in parsed


def test_json_formatter_includes_exception():
    try:
        raise ValueError("test error")
    except ValueError:
        import sys
        exc_info = sys.exc_info()
    parsed = json.loads(JSONFormatter().format(_record("fail", (), logging.ERROR, exc_info)))
    assert parsed["exception"]["type"] == "ValueError"
    assert parsed["exception"]["message"] == "test error"


def test_json_formatter_context_extras():
    record = _record()
    record.ctx_athlete_id = "a1"
    record.ctx_tier = "duration_only"
    parsed = json.loads(JSONFormatter().format(record))
    assert parsed["context"] == {"athlete_id": "a1", "tier": "duration_only"}


def test_get_logger_returns_named_logger():
    log = get_logger("plancore.services")
    assert log.name == "plancore.services"
    assert isinstance(log, logging.Logger)


def test_setup_logging_idempotent():
    root = logging.getLogger()
    initial_count = len(root.handlers)
    setup_logging()
    setup_logging()
    assert len(root.handlers) <= initial_count + 1
