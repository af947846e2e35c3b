"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "last-month", "this-year", "last-year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Accepts "today", "yesterday", "tomorrow" and any absolute date dateutil
    understands ("2024-01-15", "15 Jan 2024"). Ambiguous numeric dates are
    read day-first ("05/01/2024" is 5 January), as written on Indian bills.

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative:
        return relative[text]

    try:
        if len(text) == 10 and text[4] == "-" and text[7] == "-":
            return date_parser.isoparse(text).date()
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a named reporting period.

    Args:
        period: One of this-month, last-month, this-year, last-year
        today: Reference date, defaults to the current date

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        first_of_this_month = today.replace(day=1)
        return first_of_this_month - relativedelta(months=1), first_of_this_month - timedelta(days=1)
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "last-year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
