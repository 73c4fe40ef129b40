"""Tests for amount parser."""

import pytest
from decimal import Decimal

from duetrack.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("105", Decimal("105")),
        ("1,200.50", Decimal("1200.50")),
        ("$ 54.20", Decimal("54.20")),
        ("3000 USD", Decimal("3000")),
        ("€12", Decimal("12")),
    ],
)
def test_parse_amount(text, expected):
    """Test currency symbols and separators are ignored."""
    assert parse_amount(text) == expected


def test_negative_amounts():
    """Test negative amounts need explicit permission."""
    with pytest.raises(ValueError, match="cannot be negative"):
        parse_amount("-5")
    assert parse_amount("-5", allow_negative=True) == Decimal("-5")
    assert parse_amount("(1,000.00)", allow_negative=True) == Decimal("-1000.00")


@pytest.mark.parametrize("text", ["", "abc", "nan", "1.2.3"])
def test_invalid_amounts(text):
    """Test malformed input raises ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)
