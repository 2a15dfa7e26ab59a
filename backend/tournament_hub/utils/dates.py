"""
Date helpers for tournament bucketing and housing alerts.

Tournament dates arrive as date objects from the database and as
"YYYY-MM-DD" strings from imports; coerce_date() accepts both.
"""
import calendar
from datetime import date, datetime
from typing import Optional, Tuple, Union


def month_bounds(today: date) -> Tuple[date, date]:
    """First and last day of today's month (inclusive)."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def coerce_date(value: Optional[Union[str, date, datetime]]) -> Optional[date]:
    """
    Normalize a date-ish value.

    - None or "" -> None
    - datetime -> its date
    - "2026-03-15" or "2026-03-15T09:00:00" -> date(2026, 3, 15)
    - Unparseable strings -> ValueError
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    return date.fromisoformat(s[:10])


def days_until(target: datetime, now: datetime) -> int:
    """Whole days from now until target, truncated toward zero."""
    seconds = (target - now).total_seconds()
    return int(seconds / 86400)
