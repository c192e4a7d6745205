from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_valid_range
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Employee, HourlyRatePeriod
from .repository import EmployeeRepository, HourlyRatePeriodRepository

logger = logging.getLogger(__name__)

MANAGE_ROLES = (Role.SUPER_ADMIN, Role.COMPANY_ADMIN, Role.MANAGER)


def _require_rate(value) -> float:
    try:
        rate = float(value)
    except (TypeError, ValueError):
        raise ValidationError("hourlyRate must be a number")
    if rate <= 0:
        raise ValidationError("hourlyRate must be positive")
    return rate


class HourlyRateService:
    """Create, list, change and delete dated hourly rates.

    Admins and managers manage rates for their own company (super admins for
    anyone). Periods of one employee must not overlap, so at most one rate
    applies on any day.
    """

    def __init__(self, employees: EmployeeRepository, periods: HourlyRatePeriodRepository):
        self._employees = employees
        self._periods = periods

    @staticmethod
    def _require_manager(role: Role) -> None:
        if role not in MANAGE_ROLES:
            raise AuthorizationError("You do not have permission to manage hourly rate periods")

    @staticmethod
    def _require_same_company(role: Role, company_id: Optional[int], employee: Employee) -> None:
        if role != Role.SUPER_ADMIN and employee.organization_id != company_id:
            raise AuthorizationError("You cannot manage hourly rate periods for this user")

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return employee

    def _require_no_overlap(self, employee_id: int, start: date, end: date, *, ignore: Optional[int] = None) -> None:
        for period in self._periods.list_for_employees([employee_id], start=start, end=end):
            if period.period_id != ignore and period.overlaps(start, end):
                raise ValidationError("Hourly rate period overlaps with an existing period")

    def create(
        self,
        *,
        role: Role,
        company_id: Optional[int],
        user_id: int,
        employee_id: int,
        start: date,
        end: date,
        hourly_rate,
    ) -> HourlyRatePeriod:
        self._require_manager(role)
        require_valid_range(start, end)
        rate = _require_rate(hourly_rate)
        employee = self._employee(employee_id)
        self._require_same_company(role, company_id, employee)
        self._require_no_overlap(employee_id, start, end)

        period = self._periods.create(employee_id, start, end, rate, created_by=user_id)
        logger.info(
            "Created hourly rate %.2f for employee %s from %s to %s",
            rate,
            employee_id,
            start.isoformat(),
            end.isoformat(),
        )
        return period

    def update(
        self,
        *,
        role: Role,
        company_id: Optional[int],
        period_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        hourly_rate=None,
    ) -> HourlyRatePeriod:
        self._require_manager(role)
        current = self._get(period_id)
        self._require_same_company(role, company_id, self._employee(current.employee_id))

        changed = replace(
            current,
            start_date=start or current.start_date,
            end_date=end or current.end_date,
            hourly_rate=_require_rate(hourly_rate) if hourly_rate is not None else current.hourly_rate,
        )
        require_valid_range(changed.start_date, changed.end_date)
        if (changed.start_date, changed.end_date) != (current.start_date, current.end_date):
            self._require_no_overlap(changed.employee_id, changed.start_date, changed.end_date, ignore=period_id)

        self._periods.update(changed)
        logger.info("Updated hourly rate period %s", period_id)
        return changed

    def delete(self, *, role: Role, company_id: Optional[int], period_id: int) -> None:
        self._require_manager(role)
        period = self._get(period_id)
        self._require_same_company(role, company_id, self._employee(period.employee_id))
        self._periods.delete(period_id)
        logger.info("Deleted hourly rate period %s of employee %s", period_id, period.employee_id)

    def _get(self, period_id: int) -> HourlyRatePeriod:
        period = self._periods.get(period_id)
        if period is None:
            raise NotFoundError("Hourly rate period not found")
        return period

    def list_periods(
        self,
        *,
        role: Role,
        company_id: Optional[int],
        user_id: int,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[HourlyRatePeriod]:
        """Newest first. Managers see their company, employees only themselves."""
        employee_ids: Optional[list[int]]
        if role == Role.SUPER_ADMIN:
            employee_ids = [employee_id] if employee_id is not None else None
        elif role in MANAGE_ROLES:
            if employee_id is not None:
                employee = self._employees.get_by_id(employee_id)
                if employee is None or employee.organization_id != company_id:
                    raise AuthorizationError("You do not have permission to view this hourly rate period")
                employee_ids = [employee_id]
            elif company_id is None:
                employee_ids = []
            else:
                employee_ids = [e.employee_id for e in self._employees.list_active(organization_id=company_id)]
        else:
            employee_ids = [user_id]

        periods = self._periods.list_for_employees(employee_ids, start=start, end=end)
        return sorted(periods, key=lambda p: (p.start_date, p.period_id), reverse=True)
