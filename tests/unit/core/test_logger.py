"""
Unit tests for core.logger module.

Tests:
- Logger initialization with name and output mode
- Structured key=value formatting and escaping
- JSON output mode
- StructuredFormatter rendering of plain and structured records
- setup_logging() handler installation
"""

import json
import logging
import sys

import pytest

from atlas_exporter.core import Logger, StructuredFormatter, setup_logging
from atlas_exporter.core.logger import format_kv_pairs


class TestInit:
    """Logger initialization."""

    def test_name(self):
        assert Logger("exporter").name == "exporter"

    def test_default_not_json(self):
        assert Logger("test")._json_output is False

    def test_json_mode(self):
        assert Logger("test", json_output=True)._json_output is True

    def test_default_max_value_length(self):
        assert Logger("test")._max_value_length == 1000


class TestFormatKvPairs:
    """Key-value pairs formatting and escaping."""

    def test_simple(self):
        assert format_kv_pairs({"key": "hello"}) == " key=hello"
        assert format_kv_pairs({"key": 123}) == " key=123"

    def test_with_spaces(self):
        assert format_kv_pairs({"key": "hello world"}) == ' key="hello world"'

    def test_with_equals(self):
        assert format_kv_pairs({"key": "foo=bar"}) == ' key="foo=bar"'

    def test_with_double_quotes(self):
        assert format_kv_pairs({"key": 'say "hi"'}) == ' key="say \\"hi\\""'

    def test_empty_value(self):
        assert format_kv_pairs({"key": ""}) == ' key=""'

    def test_empty_dict(self):
        assert format_kv_pairs({}) == ""

    def test_truncation(self):
        result = format_kv_pairs({"key": "x" * 1500}, max_value_length=1000)
        assert "truncated 500 chars" in result

    def test_no_truncation(self):
        result = format_kv_pairs({"key": "x" * 1500}, max_value_length=None)
        assert "truncated" not in result

    def test_custom_prefix(self):
        assert format_kv_pairs({"key": "val"}, prefix="") == "key=val"


class TestStructuredFormatter:
    """Record rendering."""

    def _record(self, msg, **extra):
        record = logging.LogRecord("atlas", logging.INFO, __file__, 1, msg, None, None)
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_plain_record(self):
        assert StructuredFormatter().format(self._record("hello")) == "info atlas hello"

    def test_structured_record(self):
        record = self._record("results_loaded", structured_kv={"count": 3})
        assert StructuredFormatter().format(record) == "info atlas results_loaded count=3"

    def test_exception_appended(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "atlas", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        text = StructuredFormatter().format(record)
        assert text.startswith("error atlas failed\n")
        assert "RuntimeError: boom" in text


class TestIntegration:
    """Integration with real logging."""

    def test_log_to_handler(self, caplog):
        with caplog.at_level(logging.INFO):
            Logger("integration_test").info("hello", world=True)

        assert len(caplog.records) == 1
        assert caplog.records[0].message == "hello"
        assert caplog.records[0].structured_kv == {"world": True}

    def test_long_values_truncated(self, caplog):
        with caplog.at_level(logging.INFO):
            Logger("trunc", max_value_length=10).info("msg", data="y" * 50)

        assert "truncated 40 chars" in caplog.records[0].structured_kv["data"]

    def test_json_log_to_handler(self, caplog):
        with caplog.at_level(logging.INFO):
            Logger("json_test", json_output=True).info("test", value=42)

        parsed = json.loads(caplog.records[0].message)
        assert parsed["message"] == "test"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "json_test"
        assert parsed["value"] == 42

    def test_below_level_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING):
            Logger("quiet").info("hidden")
        assert caplog.records == []

    @pytest.mark.parametrize(
        ("method", "level"),
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_levels(self, caplog, method, level):
        with caplog.at_level(logging.DEBUG):
            getattr(Logger("levels"), method)("event")
        assert caplog.records[0].levelno == level

    def test_exception_captures_traceback(self, caplog):
        with caplog.at_level(logging.ERROR):
            try:
                raise ValueError("bad")
            except ValueError:
                Logger("exc").exception("export_failed", measurement="1")

        assert caplog.records[0].exc_info is not None


class TestSetupLogging:
    """Root handler installation."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def _structured_handlers(self):
        return [
            h
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, StructuredFormatter)
        ]

    def test_installs_handler(self):
        setup_logging("DEBUG")
        assert len(self._structured_handlers()) == 1
        assert logging.getLogger().level == logging.DEBUG

    def test_idempotent(self):
        setup_logging()
        setup_logging("warning")
        assert len(self._structured_handlers()) == 1
        assert logging.getLogger().level == logging.WARNING
