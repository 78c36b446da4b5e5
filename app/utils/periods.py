from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo


def resolve_timezone(tz: Optional[tzinfo | str]) -> tzinfo:
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def reference_date(now: Optional[datetime | date] = None, tz: Optional[tzinfo | str] = None) -> date:
    """Calendar day of the reference clock in ``tz``.

    ``now`` defaults to the wall clock; naive datetimes are read as local time
    in ``tz`` already.
    """
    zone = resolve_timezone(tz)
    if now is None:
        return datetime.now(zone).date()
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(zone)
        return now.date()
    return now


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def months_back(today: date, count: int) -> List[Tuple[int, int]]:
    """The ``count`` (year, month) pairs ending at ``today``'s month, oldest first."""
    return [shift_month(today.year, today.month, -offset) for offset in range(count - 1, -1, -1)]


def subtract_months(day: date, count: int) -> date:
    year, month = shift_month(day.year, day.month, -count)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def days_back(today: date, count: int) -> List[date]:
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
