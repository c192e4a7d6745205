from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Employee, HourlyRatePeriod


class EmployeeRepository(Protocol):
    """Employee directory.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_many(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active(self, *, organization_id: Optional[int] = None) -> Sequence[Employee]:
        """Active employees, excluding super admins, optionally scoped to one organization."""

        raise NotImplementedError


class HourlyRatePeriodRepository(Protocol):
    """Dated hourly rates. Periods of one employee never overlap."""

    def get(self, period_id: int) -> Optional[HourlyRatePeriod]:
        raise NotImplementedError

    def list_for_employees(
        self,
        employee_ids: Optional[Sequence[int]],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[HourlyRatePeriod]:
        """Periods touching [start, end] (either bound optional); None ids means every employee."""

        raise NotImplementedError

    def create(
        self,
        employee_id: int,
        start_date: date,
        end_date: date,
        hourly_rate: float,
        *,
        created_by: Optional[int] = None,
    ) -> HourlyRatePeriod:
        raise NotImplementedError

    def update(self, period: HourlyRatePeriod) -> None:
        raise NotImplementedError

    def delete(self, period_id: int) -> bool:
        raise NotImplementedError
