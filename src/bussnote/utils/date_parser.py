"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

DASHBOARD_RANGES = ("today", "yesterday", "week", "month", "year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports:
    - ISO dates: "2025-01-15" (the wire format)
    - Other absolute dates understood by dateutil: "15 Jan 2025"
    - Relative words: "today", "yesterday", "tomorrow"
    - Day offsets: "+15d", "-3d" (relative to today)

    Args:
        date_str: Date string
        today: Reference date for relative input (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_str is None or not str(date_str).strip():
        raise ValueError("Empty date string")

    text = str(date_str).strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if text[0] in "+-" and text.endswith("d") and text[1:-1].isdigit():
        offset = int(text[1:-1])
        return add_days(today, offset if text[0] == "+" else -offset)

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def format_date(value: Optional[date]) -> Optional[str]:
    """Render a date in the YYYY-MM-DD wire format."""
    return value.isoformat() if value is not None else None


def add_days(start: date, days: int) -> date:
    """Return the calendar date `days` days after `start`.

    Raises:
        ValueError: If the result falls outside the supported date range
    """
    try:
        return start + timedelta(days=days)
    except OverflowError:
        raise ValueError(f"{days} days from {start} is out of the date range")


def start_of_week(value: date) -> date:
    """Monday of the week containing `value`."""
    return value - timedelta(days=value.weekday())


def start_of_month(value: date) -> date:
    """First day of the month containing `value`."""
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    """Last day of the month containing `value`."""
    return value.replace(day=1) + relativedelta(months=1) - timedelta(days=1)


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a dashboard period.

    Args:
        period: One of today, yesterday, week, month, year
        today: Reference date (defaults to date.today())

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "today":
        return (today, today)
    if period == "yesterday":
        yesterday = today - timedelta(days=1)
        return (yesterday, today)
    if period == "week":
        return (start_of_week(today), today)
    if period == "month":
        return (start_of_month(today), today)
    if period == "year":
        return (today.replace(month=1, day=1), today)

    raise ValueError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(DASHBOARD_RANGES)}"
    )
