"""Date manipulation utilities"""

import calendar
from datetime import date, datetime
from typing import Optional, Union


def add_months(start: date, months: int) -> date:
    """
    Advance a date by whole calendar months.

    The day is clamped to the last valid day of the target month:
    2024-01-31 + 1 month -> 2024-02-29, + 2 months -> 2024-03-31.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def months_elapsed(
    opened_at: Optional[Union[date, datetime]],
    now: Union[date, datetime],
) -> int:
    """Whole 30-day periods between opened_at and now (0 if never opened or in the future)"""
    if opened_at is None:
        return 0
    if isinstance(opened_at, datetime):
        opened_at = opened_at.date()
    if isinstance(now, datetime):
        now = now.date()
    days = (now - opened_at).days
    return max(0, days // 30)
