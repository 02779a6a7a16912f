"""Recency window checks for supporting documents."""

import calendar
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str, None]

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%Y/%m/%d")


def parse_date(value: DateLike) -> Optional[date]:
    """Coerce a date, datetime or date string to a date. Returns None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def subtract_months(reference: date, months: int) -> date:
    """Shift back by whole months, clamping the day to the target month's length."""
    month_index = reference.year * 12 + (reference.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(reference.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def window_start(reference_date: DateLike, window_months: int = 3) -> Optional[date]:
    reference = parse_date(reference_date)
    return subtract_months(reference, window_months) if reference else None


def is_within_window(issue_date: DateLike, reference_date: DateLike, window_months: int = 3) -> bool:
    """True iff reference - window_months <= issue <= reference.

    Absent or unparseable dates are never within the window.
    """
    issue = parse_date(issue_date)
    reference = parse_date(reference_date)
    if issue is None or reference is None or window_months < 0:
        return False
    return subtract_months(reference, window_months) <= issue <= reference
