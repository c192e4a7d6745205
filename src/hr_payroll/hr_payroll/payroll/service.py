from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from ..common.datetime_utils import month_bounds
from ..common.validators import require_month_year
from ..core.enums import PaymentType, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.repository import EmployeeRepository
from ..timesheets.enricher import TimesheetEnricher
from ..timesheets.model import EnrichedTimesheetEntry, EnrichedTotals
from .model import Adjustment


def _r2(value: float) -> float:
    return round(value, 2)


class PayrollService:
    def __init__(self, employees: EmployeeRepository, enricher: TimesheetEnricher):
        self._employees = employees
        self._enricher = enricher

    @staticmethod
    def require_can_view(*, actor_role: Role, actor_id: int, employee_id: int) -> None:
        if actor_role == Role.EMPLOYEE and actor_id != employee_id:
            raise AuthorizationError("You can only view your own daily earnings")

    def daily_entries(self, employee_id: int, month: int, year: int, *, now: datetime) -> dict[date, EnrichedTimesheetEntry]:
        month, year = require_month_year(month, year)
        start, end = month_bounds(month, year)
        return {e.work_date: e for e in self._enricher.enrich(employee_id, start, end, now=now)}

    def daily_earnings(self, employee_id: int, month: int, year: int, *, now: datetime) -> dict[str, dict]:
        """Every day of the month keyed by day-of-month ("1".."31")."""
        entries = self.daily_entries(employee_id, month, year, now=now)
        return {str(day.day): entry.to_daily_dict() for day, entry in sorted(entries.items())}

    def monthly_summary(
        self,
        employee_id: int,
        month: int,
        year: int,
        *,
        now: datetime,
        bonuses: Iterable[Adjustment] = (),
        deductions: Iterable[Adjustment] = (),
    ) -> dict:
        month, year = require_month_year(month, year)
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")

        entries = self.daily_entries(employee_id, month, year, now=now).values()
        totals = EnrichedTotals.of(entries)

        if employee.payment_type == PaymentType.SALARY:
            base = employee.monthly_salary or 0.0
            rate_missing = base <= 0
        else:
            base = totals.total_earnings
            rate_missing = any(e.rate_missing and e.hours > 0 for e in entries)

        total_bonuses = sum(b.amount for b in bonuses)
        total_deductions = sum(d.amount for d in deductions)

        return {
            "employeeId": employee_id,
            "month": month,
            "year": year,
            "paymentType": employee.payment_type.value if employee.payment_type else None,
            "totalHours": _r2(totals.total_hours),
            "regularHours": _r2(totals.regular_hours),
            "overtimeHours": _r2(totals.overtime_hours),
            "baseSalary": _r2(base),
            "totalBonuses": _r2(total_bonuses),
            "totalDeductions": _r2(total_deductions),
            "netSalary": _r2(base + total_bonuses - total_deductions),
            "rateMissing": rate_missing,
        }
