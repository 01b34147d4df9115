"""
Tests for the stdlib logging bridge.
"""

import io
import logging
import os

import pytest

from logmark.bridge import MarkdownLoggingFormatter
from logmark.formatters import MarkdownFormatter


def _make_record(level, msg, args=None, context=None, exc_info=None):
    record = logging.LogRecord("shop", level, __file__, 10, msg, args, exc_info)
    if context is not None:
        record.context = context
    return record


def _fail():
    raise ConnectionError("db unreachable")


@pytest.fixture
def captured():
    """Logger with a markdown handler writing to a StringIO."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    root = os.path.dirname(os.path.dirname(__file__))
    handler.setFormatter(MarkdownLoggingFormatter(MarkdownFormatter(project_root=root)))
    logger = logging.getLogger("logmark.tests.bridge")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    logger.addHandler(handler)
    yield logger, stream
    logger.removeHandler(handler)


class TestToRecord:
    def test_fields_copied(self):
        bridge = MarkdownLoggingFormatter()
        record = bridge.to_record(_make_record(logging.WARNING, "Disk {disk} full", context={"disk": "sda"}))
        assert record.level == 30
        assert record.level_name == "WARNING"
        assert record.message == "Disk {disk} full"
        assert record.context == {"disk": "sda"}
        assert record.timestamp.tzinfo is not None

    def test_percent_args_applied(self):
        record = MarkdownLoggingFormatter().to_record(_make_record(logging.INFO, "took %d ms", args=(5,)))
        assert record.message == "took 5 ms"

    def test_missing_context_is_empty(self):
        assert MarkdownLoggingFormatter().to_record(_make_record(logging.INFO, "m")).context == {}

    def test_custom_context_attribute(self):
        raw = _make_record(logging.INFO, "m")
        raw.fields = {"a": 1}
        assert MarkdownLoggingFormatter(context_attr="fields").to_record(raw).context == {"a": 1}

    def test_exc_info_becomes_exception(self):
        try:
            _fail()
        except ConnectionError as exc:
            error = exc
        raw = _make_record(logging.ERROR, "m", exc_info=(type(error), error, error.__traceback__))
        assert MarkdownLoggingFormatter().to_record(raw).context["exception"] is error

    def test_explicit_exception_kept(self):
        try:
            _fail()
        except ConnectionError as exc:
            error = exc
        marker = object()
        raw = _make_record(logging.ERROR, "m", context={"exception": marker},
                           exc_info=(type(error), error, error.__traceback__))
        assert MarkdownLoggingFormatter().to_record(raw).context["exception"] is marker

    def test_caller_context_not_mutated(self):
        context = {"a": 1}
        try:
            _fail()
        except ConnectionError as exc:
            error = exc
        raw = _make_record(logging.ERROR, "m", context=context,
                           exc_info=(type(error), error, error.__traceback__))
        MarkdownLoggingFormatter().to_record(raw)
        assert context == {"a": 1}


class TestLoggingIntegration:
    def test_info_headline(self, captured):
        logger, stream = captured
        logger.info("Hello {name}", extra={"context": {"name": "Bob"}})
        assert stream.getvalue() == ":information_source: Hello Bob\n"

    def test_error_context_block(self, captured):
        logger, stream = captured
        logger.error("Order {order_id} failed", extra={"context": {"order_id": 42, "retry": False}})
        assert stream.getvalue() == (
            "## :exclamation: Order 42 failed\n\n"
            "**Context:**\n```json\n"
            '{\n    "retry": false\n}\n'
            "```\n"
        )

    def test_logger_exception_renders_stack_table(self, captured):
        logger, stream = captured
        try:
            _fail()
        except ConnectionError:
            logger.exception("Sync failed")
        lines = stream.getvalue().splitlines()
        assert lines[0] == "## :exclamation: Sync failed"
        assert lines[2].startswith("| Function")
        assert lines[4].startswith("| _fail() ")
        assert "tests/test_bridge.py:" in lines[4].replace(os.sep, "/")
        assert "TestLoggingIntegration.test_logger_exception_renders_stack_table()" in lines[5]

    def test_format_batch(self):
        bridge = MarkdownLoggingFormatter()
        records = [_make_record(logging.DEBUG, "one"), _make_record(logging.INFO, "two")]
        assert bridge.format_batch(records) == ":information_source: one\n\n:information_source: two"
