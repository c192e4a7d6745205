from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..model import DayValues


@dataclass(frozen=True)
class OverrideFields:
    """Manually entered values for one employee-day. None means "not overridden"."""

    hourly_rate: Optional[float] = None
    regular_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    total_hours: Optional[float] = None
    earnings: Optional[float] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None

    @property
    def pins_hours(self) -> bool:
        """Both hour parts are set, so the effective hours no longer depend on attendance."""
        return self.regular_hours is not None and self.overtime_hours is not None


@dataclass(frozen=True)
class DailyPayrollOverride:
    employee_id: int
    work_date: date
    fields: OverrideFields
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        f = self.fields
        return {
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "hourlyRate": f.hourly_rate,
            "regularHours": f.regular_hours,
            "overtimeHours": f.overtime_hours,
            "totalHours": f.total_hours,
            "earnings": f.earnings,
            "notes": f.notes,
            "createdBy": f.created_by,
        }


@dataclass(frozen=True)
class OverrideResolution:
    """Effective values for a day next to the independently computed originals."""

    effective: DayValues
    original: DayValues
    is_override: bool
    override: Optional[DailyPayrollOverride] = None

    @property
    def pins_hours(self) -> bool:
        return self.override is not None and self.override.fields.pins_hours

    def to_dict(self) -> dict:
        return {
            "effective": self.effective.to_dict(),
            "original": self.original.to_dict(),
            "isOverride": self.is_override,
            "override": self.override.to_dict() if self.override else None,
        }
