from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, count_working_days
from ..core.constants import STANDARD_HOURS_PER_DAY
from ..core.enums import PaymentType
from .model import Employee, HourlyRatePeriod
from .repository import HourlyRatePeriodRepository


class RateResolver:
    """Resolve the rate in effect for an employee on a given day.

    HOURLY employees get the rate of the dated period covering the day, falling
    back to the rate on the employee record. SALARY employees get the monthly
    salary as-is, or, when `hourly_equivalent=True`, the salary spread over the
    working days of that month at `standard_hours_per_day`. Returns None when
    nothing is configured; callers must surface that instead of treating it as a
    zero rate.
    """

    def __init__(
        self,
        period_repo: Optional[HourlyRatePeriodRepository] = None,
        *,
        standard_hours_per_day: float = STANDARD_HOURS_PER_DAY,
    ):
        self._period_repo = period_repo
        self._standard_hours_per_day = float(standard_hours_per_day)

    def periods_for(self, employee_id: int, start: date, end: date) -> tuple[HourlyRatePeriod, ...]:
        """Rate periods touching [start, end]; pass them to `resolve` to avoid a lookup per day."""
        if self._period_repo is None:
            return ()
        return tuple(self._period_repo.list_for_employees([employee_id], start=start, end=end))

    def resolve(
        self,
        employee: Employee,
        day: date,
        *,
        hourly_equivalent: bool = False,
        periods: Optional[Sequence[HourlyRatePeriod]] = None,
    ) -> Optional[float]:
        if employee.payment_type == PaymentType.SALARY:
            salary = _positive(employee.monthly_salary)
            if salary is None:
                return None
            if not hourly_equivalent:
                return salary
            start, end = month_bounds(day.month, day.year)
            hours = count_working_days(start, end) * self._standard_hours_per_day
            return salary / hours if hours > 0 else None

        # HOURLY, or unset payment type with a rate on file.
        if periods is None:
            periods = self.periods_for(employee.employee_id, day, day)
        for period in periods:
            if period.employee_id == employee.employee_id and period.covers(day):
                rate = _positive(period.hourly_rate)
                if rate is not None:
                    return rate
        return _positive(employee.hourly_rate)


def _positive(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return value if value > 0 else None
