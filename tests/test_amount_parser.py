"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from lendtrack.domain.errors import ValidationError
from lendtrack.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("100", Decimal("100")),
        ("123.45", Decimal("123.45")),
        ("  42 ", Decimal("42")),
        ("1,234.56", Decimal("1234.56")),
        ("$10", Decimal("10")),
        ("₾50.5", Decimal("50.5")),
        ("€ 7", Decimal("7")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
def test_parse_amount_invalid(text):
    with pytest.raises(ValidationError):
        parse_amount(text)


@pytest.mark.parametrize("text", ["0", "0.00", "-5", "-$5"])
def test_parse_amount_not_positive(text):
    with pytest.raises(ValidationError, match="positive"):
        parse_amount(text)


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        parse_amount("nope")


@pytest.mark.parametrize(
    "text,expected",
    [
        ("10.005", Decimal("10.01")),
        ("0.12345678901234567891", Decimal("0.12")),
        ("1,000,000,000,000", Decimal("1000000000000.00")),
    ],
)
def test_parse_amount_rounds_to_cents(text, expected):
    amount = parse_amount(text)
    assert amount == expected
    assert amount.as_tuple().exponent == -2


@pytest.mark.parametrize("text", ["1e400", "1000000000000.01", "12345678901234567.89"])
def test_parse_amount_too_large(text):
    with pytest.raises(ValidationError, match="maximum"):
        parse_amount(text)


@pytest.mark.parametrize("text", ["1e-400", "0.004", "-1e400"])
def test_parse_amount_rounding_to_zero_is_rejected(text):
    with pytest.raises(ValidationError, match="positive"):
        parse_amount(text)
