"""Tests for money parsing and rounding."""

import pytest
from decimal import Decimal

from bussnote.utils.money import (
    decimal_places,
    format_money,
    parse_money,
    standard_round,
    to_decimal,
    truncate_round,
)


class TestStandardRound:
    """Tests for half-away-from-zero rounding."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (2.345, "2.35"),
            (-2.345, "-2.35"),
            (1.005, "1.01"),
            (Decimal("0.125"), "0.13"),
            (10, "10.00"),
            ("250.005", "250.01"),
        ],
    )
    def test_rounds_halves_away_from_zero(self, value, expected):
        """Test rounding at the x.xx5 boundary."""
        assert standard_round(value) == Decimal(expected)

    @pytest.mark.parametrize("value", [0, 0.1, 1.005, 2.675, 999999.995, Decimal("3.14159")])
    def test_idempotent(self, value):
        """Test that rounding twice gives the same result as once."""
        once = standard_round(value)
        assert standard_round(once) == once
        assert decimal_places(once) <= 2

    def test_float_representation_error_is_ignored(self):
        """Test that 0.1 + 0.2 rounds like 0.30."""
        assert standard_round(0.1 + 0.2) == Decimal("0.30")


class TestTruncateRound:
    """Tests for floor rounding used by the balance brokerage."""

    def test_floors_positive_values(self):
        assert truncate_round(Decimal("50.019")) == Decimal("50.01")

    def test_floors_negative_values(self):
        assert truncate_round(Decimal("-1.231")) == Decimal("-1.24")

    @pytest.mark.parametrize("value", [Decimal("-0.004"), Decimal("0.009"), -1e-12])
    def test_near_zero_snaps_to_zero(self, value):
        """Test that noise below one cent never shows as negative."""
        result = truncate_round(value)
        assert result == Decimal("0.00")
        assert str(result) == "0.00"


class TestFormatMoney:
    """Tests for the two-decimal wire format."""

    @pytest.mark.parametrize(
        "value,expected",
        [(1234.5, "1234.50"), (Decimal("7"), "7.00"), (Decimal("0.005"), "0.01"), (-3.2, "-3.20")],
    )
    def test_always_two_decimals(self, value, expected):
        assert format_money(value) == expected


class TestParseMoney:
    """Tests for parsing amount strings."""

    def test_plain(self):
        assert parse_money("123.45") == Decimal("123.45")

    def test_currency_symbols_and_commas(self):
        assert parse_money("₹1,234.56") == Decimal("1234.56")
        assert parse_money("$99") == Decimal("99")

    def test_parentheses_negative(self):
        assert parse_money("(50.00)") == Decimal("-50.00")

    @pytest.mark.parametrize("value", ["", "   ", "abc", "NaN", "Infinity", "1.2.3"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_money(value)


class TestToDecimal:
    """Tests for boundary conversion of numbers."""

    def test_float_uses_shortest_repr(self):
        assert to_decimal(1.005) == Decimal("1.005")

    def test_rejects_bool(self):
        with pytest.raises(ValueError):
            to_decimal(True)

    def test_rejects_non_finite_float(self):
        with pytest.raises(ValueError):
            to_decimal(float("inf"))
        with pytest.raises(ValueError):
            to_decimal(float("nan"))
