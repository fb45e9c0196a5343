"""Tests for date parser with relative dates."""

import pytest
from datetime import date, timedelta
from bussnote.utils.date_parser import (
    add_days,
    end_of_month,
    format_date,
    get_date_range,
    parse_date,
    start_of_week,
)

TODAY = date(2025, 5, 14)  # a Wednesday


def test_parse_absolute_date():
    """Test parsing absolute dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_written_date():
    """Test parsing dates dateutil understands."""
    assert parse_date("15 Jan 2025") == date(2025, 1, 15)


def test_parse_relative_words():
    """Test parsing 'today', 'yesterday' and 'tomorrow'."""
    assert parse_date("today", today=TODAY) == TODAY
    assert parse_date("Yesterday", today=TODAY) == date(2025, 5, 13)
    assert parse_date("tomorrow", today=TODAY) == date(2025, 5, 15)


def test_parse_default_today():
    """Test that relative dates default to the real today."""
    assert parse_date("today") == date.today()


def test_parse_day_offsets():
    """Test '+Nd' and '-Nd'."""
    assert parse_date("+15d", today=TODAY) == date(2025, 5, 29)
    assert parse_date("-14d", today=TODAY) == date(2025, 4, 30)


@pytest.mark.parametrize("value", ["", "   ", "gibberish"])
def test_parse_invalid(value):
    """Test invalid input raises ValueError."""
    with pytest.raises(ValueError):
        parse_date(value)


def test_helpers():
    """Test calendar helpers."""
    assert add_days(date(2025, 1, 1), 15) == date(2025, 1, 16)
    assert add_days(date(2024, 2, 20), 10) == date(2024, 3, 1)
    assert start_of_week(TODAY) == date(2025, 5, 12)
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert format_date(date(2025, 1, 2)) == "2025-01-02"
    assert format_date(None) is None


@pytest.mark.parametrize(
    "period,expected",
    [
        ("today", (TODAY, TODAY)),
        ("yesterday", (date(2025, 5, 13), TODAY)),
        ("week", (date(2025, 5, 12), TODAY)),
        ("month", (date(2025, 5, 1), TODAY)),
        ("year", (date(2025, 1, 1), TODAY)),
    ],
)
def test_get_date_range(period, expected):
    """Test dashboard ranges."""
    assert get_date_range(period, today=TODAY) == expected


def test_get_date_range_unknown():
    """Test unknown period raises ValueError."""
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("fortnight", today=TODAY)


def test_out_of_range_offsets():
    """Test that offsets past the calendar raise ValueError."""
    with pytest.raises(ValueError, match="out of the date range"):
        add_days(date(2025, 1, 1), 10**8)
    with pytest.raises(ValueError):
        parse_date("+99999999d", today=TODAY)
