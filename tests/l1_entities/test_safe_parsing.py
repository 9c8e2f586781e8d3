"""Tests for lenient numeric parsing and text normalization."""

import pytest

from router_chat.l1_entities.safe_parsing import normalize_text, parse_float, parse_int


class TestParseInt:
    @pytest.mark.parametrize(
        ('value', 'expected'),
        [(5, 5), (5.0, 5), (5.99, 5), ('7', 7), (' 7 ', 7), ('7.5', 7), (None, None), ('x', None), (True, None), ([], None)],
    )
    def test_values(self, value, expected):
        assert parse_int(value) == expected

    def test_nan_is_none(self):
        assert parse_int(float('nan')) is None


class TestParseFloat:
    @pytest.mark.parametrize(
        ('value', 'expected'),
        [(1, 1.0), (0.5, 0.5), ('0.000001', 0.000001), (None, None), ('abc', None), (False, None)],
    )
    def test_values(self, value, expected):
        assert parse_float(value) == expected


class TestNormalizeText:
    def test_plain_text_unchanged(self):
        assert normalize_text('Привет, мир 👋') == 'Привет, мир 👋'

    def test_nfc(self):
        assert normalize_text('e\u0301') == '\u00e9'

    def test_lone_surrogate_replaced(self):
        result = normalize_text('a\ud800b')
        assert '\ud800' not in result
        assert '\ufffd' in result
        assert result[0] == 'a'
        assert result[-1] == 'b'
