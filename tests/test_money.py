"""Tests for money helpers"""
from decimal import Decimal

import pytest

from cartstore.services.money import format_money, round_money, to_decimal


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Decimal("0")),
        (0.1, Decimal("0.1")),
        ("179.90", Decimal("179.90")),
        (100, Decimal("100")),
        ("abc", Decimal("0")),
    ],
)
def test_to_decimal(value, expected):
    assert to_decimal(value) == expected


def test_round_money_half_up():
    assert round_money("2.675") == Decimal("2.68")
    assert round_money(10) == Decimal("10.00")


def test_format_brl():
    assert format_money(1234.5) == "R$ 1.234,50"
    assert format_money("179.9") == "R$ 179,90"


def test_format_usd():
    assert format_money(1234.5, currency="USD") == "$1,234.50"


def test_format_unknown_currency_uses_code():
    assert format_money(5, currency="GBP") == "GBP5.00"
