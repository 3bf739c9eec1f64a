"""Tests for the shared text helpers."""

import pytest

from settleup.utils.parsing import ParsingUtils


class TestParsingUtils:

    def test_normalize_collapses_whitespace(self):
        assert ParsingUtils.normalize_text("  Alice \t and   Bob ") == "Alice and Bob"

    def test_normalize_strips_bom(self):
        assert ParsingUtils.normalize_text("\ufeffAlice") == "Alice"

    def test_normalize_none(self):
        assert ParsingUtils.normalize_text(None) == ""

    def test_tokens(self):
        assert ParsingUtils.tokens(" food  - dinner ") == ["food", "-", "dinner"]
        assert ParsingUtils.tokens("   ") == []

    @pytest.mark.parametrize("raw, expected", [
        ("12.50", 12.5),
        ("-3", -3.0),
        ("0", 0.0),
        (7, 7.0),
    ])
    def test_coerce_amount(self, raw, expected):
        assert ParsingUtils.coerce_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "12,50", "nan", "inf", None])
    def test_coerce_amount_rejects(self, raw):
        assert ParsingUtils.coerce_amount(raw) is None
