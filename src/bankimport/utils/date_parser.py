"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Tried in order; the first format that parses wins. ISO first, then
# day-first layouts used by most European banks, then month-first.
STATEMENT_DATE_FORMATS = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%d-%m-%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
)


def parse_statement_date(date_str: str, formats: tuple[str, ...] = STATEMENT_DATE_FORMATS) -> date:
    """Parse a date cell from a bank statement.

    Unlike ``parse_date`` this only accepts the fixed layouts in ``formats``
    so that an ambiguous cell is never guessed. A time portion after the
    first space is ignored ("15/01/2024 08:30").

    Args:
        date_str: Raw date cell
        formats: strptime formats to try, in order

    Returns:
        Date object

    Raises:
        ValueError: If no format matches
    """
    if date_str is None or not date_str.strip():
        raise ValueError("Empty date string")

    value = date_str.strip().split(" ", 1)[0]
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Could not parse date '{date_str.strip()}'")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Used for command-line filters, so it is lenient and supports relative
    dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
