"""Tests for JSON and text log formatters and setup_logging()."""

from __future__ import annotations

import json
import logging
import sys

from customerio_async.logging_config import (
    PACKAGE_LOGGER,
    JSONFormatter,
    TextFormatter,
    setup_logging,
)
from customerio_async.services.request_context import bind_request_id


def _make_record(msg: str = "hello", level: int = logging.INFO, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="customerio_async.dispatcher",
        level=level,
        pathname="dispatcher.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_output_structure():
    data = json.loads(JSONFormatter().format(_make_record("sent")))
    assert data["level"] == "INFO"
    assert data["logger"] == "customerio_async.dispatcher"
    assert data["message"] == "sent"
    assert "timestamp" in data
    assert "request_id" not in data


def test_json_includes_request_id():
    with bind_request_id("abc123def456"):
        data = json.loads(JSONFormatter().format(_make_record("with id")))
    assert data["request_id"] == "abc123def456"


def test_json_includes_extras():
    record = _make_record("x", endpoint_class="tracking", _hidden=1)
    data = json.loads(JSONFormatter().format(record))
    assert data["endpoint_class"] == "tracking"
    assert "_hidden" not in data
    assert "lineno" not in data


def test_json_exception_formatting():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _make_record("error")
        record.exc_info = sys.exc_info()
    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exception"]


def test_text_format_with_request_id():
    with bind_request_id("aabbccdd1122eeff"):
        output = TextFormatter().format(_make_record("hello text"))
    assert "[aabbccdd1122]" in output
    assert "hello text" in output


def test_text_format_without_request_id():
    output = TextFormatter().format(_make_record("no rid"))
    assert "[" not in output
    assert "customerio_async.dispatcher - no rid" in output


def test_setup_logging_configures_package_logger_only():
    root_handlers = list(logging.getLogger().handlers)
    logger = setup_logging("debug", "json")
    try:
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        ours = [h for h in logger.handlers if getattr(h, "_customerio_handler", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JSONFormatter)
        assert logging.getLogger().handlers == root_handlers
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_setup_logging_is_idempotent():
    logger = setup_logging()
    setup_logging()
    try:
        ours = [h for h in logger.handlers if getattr(h, "_customerio_handler", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, TextFormatter)
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)
