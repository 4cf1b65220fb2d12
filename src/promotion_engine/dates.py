"""Calendar helpers: boundary date parsing and retirement date derivation.

Dates cross the boundary as ``DD-MM-YYYY`` text and are held internally as
:class:`datetime.date`. A member retires on the last calendar day of the
month in which they reach the retirement age, whatever their day of birth.
"""

import calendar
from datetime import date, datetime
from typing import Union

from src.promotion_engine.config import DATE_FORMAT, DEFAULT_RETIREMENT_AGE

DateLike = Union[date, str]


def parse_date(date_str: str) -> date:
    """Parse a ``DD-MM-YYYY`` string.

    Raises:
        ValueError: if the string is blank or not a valid calendar date.
    """
    if not isinstance(date_str, str):
        raise ValueError(f"Expected a DD-MM-YYYY string, got {date_str!r}")
    text = date_str.strip()
    if not text:
        raise ValueError("Date string is empty")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Unparsable date {date_str!r} (expected DD-MM-YYYY)") from e


def format_date(value: date) -> str:
    """Format a date as ``DD-MM-YYYY``."""
    return value.strftime(DATE_FORMAT)


def coerce_date(value: DateLike) -> date:
    """Accept a date, datetime, ``DD-MM-YYYY`` or ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return parse_date(value)
        except ValueError:
            try:
                return date.fromisoformat(value.strip())
            except ValueError:
                pass
    raise ValueError(f"Cannot interpret {value!r} as a date")


def last_day_of_month(year: int, month: int) -> int:
    """Number of the last day in *month* of *year* (leap years included)."""
    return calendar.monthrange(year, month)[1]


def retirement_date(
    dob: DateLike, retirement_age: int = DEFAULT_RETIREMENT_AGE
) -> date:
    """Retirement date for a member born on *dob*.

    Examples:
        "15-06-1965" -> 30-06-2025
        "29-02-1964" -> 29-02-2024
        "01-02-1967" -> 28-02-2027
        "10-02-1963" -> 28-02-2023
    """
    if retirement_age < 0:
        raise ValueError(f"retirement_age must be non-negative, got {retirement_age}")
    born = parse_date(dob) if isinstance(dob, str) else coerce_date(dob)
    year = born.year + retirement_age
    return date(year, born.month, last_day_of_month(year, born.month))


def is_retired(
    dob: DateLike, as_of: DateLike, retirement_age: int = DEFAULT_RETIREMENT_AGE
) -> bool:
    """True once the member's retirement date is on or before *as_of*."""
    return retirement_date(dob, retirement_age) <= coerce_date(as_of)
