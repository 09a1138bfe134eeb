#!/usr/bin/env python3
"""
calendar_view.py
--------------------
Month arithmetic for the calendar view.

Weeks start on Sunday, and weekday numbers follow that convention:
Sunday = 0 ... Saturday = 6.
"""
from __future__ import annotations

import calendar
from typing import Iterable, List, Optional, Set, Tuple

from .models import Record

WEEKDAY_LABELS = {
    "ko": ("일", "월", "화", "수", "목", "금", "토"),
    "en": ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
}

_SUNDAY_FIRST = calendar.Calendar(firstweekday=calendar.SUNDAY)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the month."""
    return calendar.monthrange(year, month)[1]


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, with Sunday = 0."""
    # calendar uses Monday = 0
    return (calendar.weekday(year, month, 1) + 1) % 7


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """
    Move forward or backward by whole months.

    Args:
        year: Starting year
        month: Starting month (1-12)
        delta: Months to move; negative goes back

    Returns:
        (year, month) after the move
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int) -> List[List[Optional[int]]]:
    """
    Day numbers laid out in Sunday-first weeks.

    Cells outside the month are None.

    Returns:
        List of weeks, each a list of seven cells
    """
    return [
        [day or None for day in week]
        for week in _SUNDAY_FIRST.monthdayscalendar(year, month)
    ]


def iso_day(year: int, month: int, day: int) -> str:
    """ISO date string for a day of the month."""
    return f"{year:04d}-{month:02d}-{day:02d}"


def days_with_records(records: Iterable[Record], year: int, month: int) -> Set[int]:
    """Day numbers in the month that have at least one record."""
    prefix = f"{year:04d}-{month:02d}-"
    return {
        int(record.date[len(prefix):])
        for record in records
        if record.date.startswith(prefix)
    }
