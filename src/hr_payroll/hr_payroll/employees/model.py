from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import PaymentType, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee with payment configuration.

    `hourly_rate` / `monthly_salary` may be missing; computation treats that as
    "earnings unknown", never as an error.
    """

    employee_id: int
    full_name: str
    email: str
    organization_id: Optional[int]
    role: Role
    payment_type: Optional[PaymentType]
    hourly_rate: Optional[float] = None
    monthly_salary: Optional[float] = None
    is_active: bool = True


@dataclass(frozen=True)
class HourlyRatePeriod:
    """An hourly rate that applies from `start_date` to `end_date`, both inclusive."""

    period_id: int
    employee_id: int
    start_date: date
    end_date: date
    hourly_rate: float
    created_by: Optional[int] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start

    def to_dict(self) -> dict:
        return {
            "id": self.period_id,
            "userId": self.employee_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "hourlyRate": round(self.hourly_rate, 2),
            "createdBy": self.created_by,
        }
