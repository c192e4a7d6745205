from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Only controllers call this; services take `now` as an argument so
    computations stay deterministic under test.
    """
    return datetime.now()


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def month_bounds(month: int, year: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return 12, today.year - 1
    return today.month - 1, today.year


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def count_working_days(start: date, end: date) -> int:
    return sum(1 for d in iter_days(start, end) if not is_weekend(d))


def monday_weeks(start: date, end: date) -> list[tuple[date, date]]:
    """Split [start, end] into Monday-start weeks clipped to the range bounds."""
    weeks: list[tuple[date, date]] = []
    week_start = start - timedelta(days=start.weekday())
    while week_start <= end:
        week_end = week_start + timedelta(days=6)
        weeks.append((max(week_start, start), min(week_end, end)))
        week_start = week_end + timedelta(days=1)
    return weeks


def minutes_since_midnight(value: datetime) -> int:
    return value.hour * 60 + value.minute


def format_minutes(minutes: float) -> str:
    """Format minutes-since-midnight as H:MM (no zero padding on hours)."""
    total = int(minutes)
    return f"{total // 60}:{total % 60:02d}"


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time(23, 59, 59))
