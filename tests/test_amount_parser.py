"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from bankimport.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("123.45", Decimal("123.45")),
        ("-42.50", Decimal("-42.50")),
        ("+100", Decimal("100")),
        ("$1,234.56", Decimal("1234.56")),
        ("-$12.00", Decimal("-12.00")),
        ("(55.10)", Decimal("-55.10")),
        ("55.10-", Decimal("-55.10")),
        ("€ 9.99", Decimal("9.99")),
        ("1.234,56", Decimal("1234.56")),
        ("-12,5", Decimal("-12.5")),
        ("1,234", Decimal("1234")),
    ],
)
def test_parse_amount_formats(raw, expected):
    """Common bank amount notations parse to the same Decimal."""
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "abc", "12.3.4", "NaN", "Infinity"])
def test_parse_amount_invalid(raw):
    """Unparseable and non-finite amounts are rejected."""
    with pytest.raises(ValueError):
        parse_amount(raw)


def test_parse_amount_none():
    """None is treated as an empty cell."""
    with pytest.raises(ValueError):
        parse_amount(None)
