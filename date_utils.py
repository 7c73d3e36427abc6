"""
date_utils.py

Small helpers for the YYYY-MM-DD date strings stored by the library system.
"""

from __future__ import annotations
import datetime
import re
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"
MIN_YEAR = 1900
MAX_YEAR = 3000

_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_date(date_str: str) -> datetime.date:
    """
    Parse a YYYY-MM-DD string into a date.

    Raises ValueError when the string is not a real calendar date.
    """
    if not isinstance(date_str, str):
        raise ValueError(f"Invalid date: {date_str!r}")
    m = _DATE_RE.match(date_str.strip())
    if not m:
        raise ValueError(f"Invalid date format: {date_str!r}")
    year, month, day = (int(g) for g in m.groups())
    return datetime.date(year, month, day)


def format_date(d: datetime.date) -> str:
    return d.strftime(DATE_FORMAT)


def get_date_string(days_to_add: int = 0, today: Optional[datetime.date] = None) -> str:
    """
    Return today's date shifted by `days_to_add`, as YYYY-MM-DD.

    Args:
        days_to_add: number of days to add (may be negative).
        today: reference date; defaults to the local current date.
    """
    base = today or datetime.date.today()
    return format_date(base + datetime.timedelta(days=int(days_to_add)))


def get_current_date_string(today: Optional[datetime.date] = None) -> str:
    return get_date_string(0, today=today)


def add_days(date_str: str, days: int) -> str:
    """Add `days` to a YYYY-MM-DD string and return the new YYYY-MM-DD string."""
    return format_date(parse_date(date_str) + datetime.timedelta(days=int(days)))


def date_difference(date1: str, date2: str) -> int:
    """
    Number of whole days from `date1` to `date2` (date2 - date1).

    Raises ValueError when either string is not a valid date.
    """
    return (parse_date(date2) - parse_date(date1)).days


def is_valid_date_string(date_str: Optional[str]) -> bool:
    """
    Check a YYYY-MM-DD string: year within 1900..3000 and an existing calendar day.

    Returns True when valid, False otherwise (including None).
    """
    if date_str is None:
        return False
    try:
        d = parse_date(date_str)
    except ValueError:
        return False
    return MIN_YEAR <= d.year <= MAX_YEAR


def calculate_overdue_days(due_date: str, return_date: Optional[str] = None,
                           today: Optional[datetime.date] = None) -> int:
    """
    Days past `due_date` at `return_date` (today when omitted), never negative.
    """
    if return_date is None:
        return_date = get_current_date_string(today=today)
    days = date_difference(due_date, return_date)
    return days if days > 0 else 0
