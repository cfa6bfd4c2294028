"""Month layout for a calendar view, computed in a target timezone."""

import calendar
from datetime import datetime
from typing import List, Optional, Tuple

from .clock import ZonedWallClock, from_zoned, resolve_timezone, to_zoned

WEEKDAY_LABELS = ("M", "T", "W", "T", "F", "S", "S")


def days_of(year: int, month: int, tz_name: str) -> List[datetime]:
    """
    Local-midnight instants for every day of a zoned month.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        tz_name: IANA timezone the month is laid out in

    Returns:
        One UTC instant per day, in calendar order
    """
    resolve_timezone(tz_name)
    if not 1 <= month <= 12:
        raise ValueError(f"month must be in 1..12, got {month}")

    _, day_count = calendar.monthrange(year, month)
    return [
        from_zoned(ZonedWallClock(year, month, day), tz_name)
        for day in range(1, day_count + 1)
    ]


def weekday_offset(first_day: datetime, tz_name: str) -> int:
    """Leading blank cells before first_day in a Monday-first week grid."""
    return to_zoned(first_day, tz_name).date().weekday()


def month_of(instant: datetime, tz_name: str) -> Tuple[int, int]:
    """Zoned (year, month) containing an instant."""
    zoned = to_zoned(instant, tz_name)
    return zoned.year, zoned.month


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by delta months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_grid(year: int, month: int, tz_name: str) -> List[List[Optional[datetime]]]:
    """Rows of seven cells for a month view; blank cells are None."""
    days = days_of(year, month, tz_name)
    cells: List[Optional[datetime]] = [None] * weekday_offset(days[0], tz_name)
    cells.extend(days)
    if len(cells) % 7:
        cells.extend([None] * (7 - len(cells) % 7))
    return [cells[i : i + 7] for i in range(0, len(cells), 7)]
