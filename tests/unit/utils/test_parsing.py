"""
Unit tests for utils.parsing module.

Tests:
- first_of() fallback pipeline
- parse_float() tolerant numeric parsing
- models_from_dict() skipping invalid documents
"""

import logging

import pytest

from atlas_exporter.models import Probe
from atlas_exporter.utils.parsing import first_of, models_from_dict, parse_float


class TestFirstOf:
    """Ordered strategy pipeline."""

    def test_first_success_wins(self):
        calls = []

        def fail(value):
            calls.append("fail")
            return None

        def upper(value):
            calls.append("upper")
            return value.upper()

        def never(value):
            calls.append("never")
            return "never"

        assert first_of((fail, upper, never), "abc") == "ABC"
        assert calls == ["fail", "upper"]

    def test_all_fail_returns_default(self):
        assert first_of((lambda v: None, lambda v: None), 1, default=7) == 7

    def test_no_strategies(self):
        assert first_of((), "x") is None

    def test_falsy_result_counts_as_success(self):
        assert first_of((lambda v: 0, lambda v: 5), None) == 0


class TestParseFloat:
    """Tolerant float parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("1.3", 1.3),
            ("1.2", 1.2),
            (" 1.0 ", 1.0),
            ("3", 3.0),
            (2, 2.0),
            (0.5, 0.5),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_float(value) == expected

    @pytest.mark.parametrize("value", ["bogus", "", None, "TLSv1.3", [], True, "nan", "inf"])
    def test_invalid_returns_default(self, value):
        assert parse_float(value) == 0.0

    def test_custom_default(self):
        assert parse_float("x", default=-1.0) == -1.0


class TestModelsFromDict:
    """Batch conversion of raw documents."""

    def test_valid_rows(self):
        probes = models_from_dict([{"id": 1}, {"id": 2}], Probe.from_dict)
        assert [p.id for p in probes] == [1, 2]

    def test_invalid_rows_skipped(self, caplog):
        rows = [{"id": 1}, {"id": "x"}, "garbage", {"id": 3}]
        with caplog.at_level(logging.WARNING):
            probes = models_from_dict(rows, Probe.from_dict)
        assert [p.id for p in probes] == [1, 3]
        assert caplog.text.count("parse_failed") == 2

    def test_empty(self):
        assert models_from_dict([], Probe.from_dict) == []
