from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..common.validators import require_valid_range
from ..core.enums import ReportPeriod
from ..core.exceptions import ValidationError


def _shift_month(month: int, year: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index % 12 + 1, index // 12


def period_bounds(period: ReportPeriod, today: date) -> tuple[date, date]:
    _, month_end = month_bounds(today.month, today.year)

    if period == ReportPeriod.LAST_MONTH:
        return month_bounds(*_shift_month(today.month, today.year, -1))
    if period == ReportPeriod.LAST_3_MONTHS:
        return month_bounds(*_shift_month(today.month, today.year, -2))[0], month_end
    if period == ReportPeriod.LAST_6_MONTHS:
        return month_bounds(*_shift_month(today.month, today.year, -5))[0], month_end
    if period == ReportPeriod.THIS_YEAR:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return month_bounds(today.month, today.year)


def resolve_period(
    period: Optional[str],
    start: Optional[date],
    end: Optional[date],
    *,
    today: date,
) -> tuple[date, date]:
    """Pick the report window: explicit start/end wins, else the named period.

    Without either, the current month is used.
    """
    if start is not None or end is not None:
        if start is None or end is None:
            raise ValidationError("startDate and endDate must be given together")
        require_valid_range(start, end)
        return start, end

    if not period:
        return period_bounds(ReportPeriod.CURRENT_MONTH, today)
    try:
        named = ReportPeriod(period)
    except ValueError:
        allowed = ", ".join(p.value for p in ReportPeriod)
        raise ValidationError(f"Unknown period '{period}'. Expected one of: {allowed}")
    return period_bounds(named, today)


def previous_period(start: date, end: date) -> tuple[date, date]:
    """Equal-length window ending the day before `start`."""
    require_valid_range(start, end)
    length = (end - start).days + 1
    return start - timedelta(days=length), start - timedelta(days=1)
