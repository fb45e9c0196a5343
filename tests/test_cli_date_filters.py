"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from bussnote.cli.date_filters import parse_date_or_exit, resolve_cli_date_range
from bussnote.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_period_with_dates(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date="2025-01-01", end_date=None, period="month")

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "--period cannot be combined" in err


def test_resolve_cli_date_range_uses_period():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period="week") == get_date_range("week")


def test_resolve_cli_date_range_explicit_dates():
    start, end = resolve_cli_date_range(_ctx(), start_date="2025-01-01", end_date="2025-01-31")
    assert start == date(2025, 1, 1)
    assert end == date(2025, 1, 31)


def test_resolve_cli_date_range_open_ended():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None) == (None, None)


def test_resolve_cli_date_range_rejects_reversed_range(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="2025-02-01", end_date="2025-01-01")
    assert "Start date must be on or before end date" in capsys.readouterr().err


def test_parse_date_or_exit_invalid(capsys):
    with pytest.raises(click.exceptions.Exit):
        parse_date_or_exit(_ctx(), "not a date", "due date")
    assert "Invalid due date" in capsys.readouterr().err
