"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "next month",
      "last friday", "in 2 weeks"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    # Handle "last/next" + time period
    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "week":
            return today - timedelta(weeks=1)
        elif period == "month":
            return today - relativedelta(months=1)
        elif period in WEEKDAYS:
            # Last Monday, etc.
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            if days_ago == 0:
                days_ago = 7
            return today - timedelta(days=days_ago)

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            return today + timedelta(weeks=1)
        elif period == "month":
            return today + relativedelta(months=1)
        elif period in WEEKDAYS:
            days_ahead = (WEEKDAYS.index(period) - today.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7
            return today + timedelta(days=days_ahead)

    # Handle "in N days/weeks/months", typical for promised return dates
    elif date_str.startswith("in "):
        parts = date_str[3:].split()
        if len(parts) == 2 and parts[0].isdigit():
            count = int(parts[0])
            unit = parts[1].rstrip("s")
            if unit == "day":
                return today + timedelta(days=count)
            elif unit == "week":
                return today + timedelta(weeks=count)
            elif unit == "month":
                return today + relativedelta(months=count)

    # Try parsing as absolute date
    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_datetime(datetime_str: str) -> datetime:
    """Parse a date-and-time string into a naive datetime.

    Relative dates accepted by parse_date resolve to midnight, except
    "now". Absolute strings may carry a time ("2024-01-15 14:30").

    Raises:
        ValueError: If the string cannot be parsed
    """
    value = datetime_str.strip()
    if value.lower() == "now":
        return datetime.now().replace(second=0, microsecond=0)

    try:
        dt = date_parser.parse(value)
        return dt.replace(tzinfo=None)
    except (ValueError, OverflowError):
        pass

    return datetime.combine(parse_date(value), time())
