"""
Rental date arithmetic.

All inputs are reduced to calendar dates before any arithmetic: a datetime
(or a datetime string) contributes only its date part and no time-zone
conversion is applied, so the result never depends on the host's zone.
"""

from datetime import date, datetime
from typing import Optional, Union

DateInput = Union[date, datetime, str, None]


def parse_date(value: DateInput) -> Optional[date]:
    """
    Coerce a date-like value to a calendar date.

    Returns:
        The date, or None if the value cannot be interpreted as one.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def inclusive_days(start: DateInput, end: DateInput) -> int:
    """
    Count the days in a rental, both endpoints included.

    Returns 0 when either date is invalid or the range is reversed; callers
    treat 0 as a rejection. A same-day rental is 1 day.
    """
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return 0
    if end_date < start_date:
        return 0
    return max(1, (end_date - start_date).days + 1)
