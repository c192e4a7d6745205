from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, TimesheetStatus
from ..payroll.model import DayValues
from ..tasks.model import TaskLog


@dataclass(frozen=True)
class TimesheetFields:
    """Values written by the generator for one employee-day."""

    hours: float
    regular_hours: float
    overtime_hours: float
    hourly_rate: Optional[float]
    earnings: float
    attendance_id: Optional[int] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class TimesheetRecord:
    timesheet_id: int
    employee_id: int
    work_date: date
    status: TimesheetStatus
    fields: TimesheetFields


@dataclass(frozen=True)
class EnrichedTimesheetEntry:
    """Derived per-day record: attendance, resolved rate, overtime split, override."""

    employee_id: int
    work_date: date
    values: DayValues
    status: Optional[AttendanceStatus] = None
    attendance: Optional[AttendanceRecord] = None
    task_logs: tuple[TaskLog, ...] = field(default_factory=tuple)
    is_override: bool = False
    original: Optional[DayValues] = None
    provisional: bool = False
    break_hours: float = 0.0

    @property
    def hours(self) -> float:
        return self.values.hours

    @property
    def regular_hours(self) -> float:
        return self.values.regular_hours

    @property
    def overtime_hours(self) -> float:
        return self.values.overtime_hours

    @property
    def hourly_rate(self) -> Optional[float]:
        return self.values.hourly_rate

    @property
    def earnings(self) -> float:
        return self.values.earnings

    @property
    def rate_missing(self) -> bool:
        return self.values.rate_missing

    @property
    def has_work(self) -> bool:
        return self.is_override or self.values.hours > 0

    def to_timesheet_fields(self) -> TimesheetFields:
        return TimesheetFields(
            hours=self.hours,
            regular_hours=self.regular_hours,
            overtime_hours=self.overtime_hours,
            hourly_rate=self.hourly_rate,
            earnings=self.earnings,
            attendance_id=self.attendance.attendance_id if self.attendance else None,
            notes=self.attendance.user_notes if self.attendance else None,
        )

    def to_daily_dict(self) -> dict:
        """Shape of one value in the daily earnings map."""
        data = self.values.to_dict()
        data["isOverride"] = self.is_override
        data["originalData"] = self.original.to_dict() if self.original else None
        return data

    def to_dict(self) -> dict:
        data = self.to_daily_dict()
        data.update(
            {
                "employeeId": self.employee_id,
                "date": self.work_date.isoformat(),
                "status": self.status.value if self.status else None,
                "attendance": self.attendance.snapshot() if self.attendance else None,
                "taskLogs": [t.to_dict() for t in self.task_logs],
                "breakHours": round(self.break_hours, 2),
                "provisional": self.provisional,
                "rateMissing": self.rate_missing,
            }
        )
        return data


@dataclass(frozen=True)
class EnrichedTotals:
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    total_earnings: float = 0.0

    @classmethod
    def of(cls, entries) -> "EnrichedTotals":
        totals = cls()
        for e in entries:
            totals = cls(
                total_hours=totals.total_hours + e.hours,
                regular_hours=totals.regular_hours + e.regular_hours,
                overtime_hours=totals.overtime_hours + e.overtime_hours,
                total_earnings=totals.total_earnings + e.earnings,
            )
        return totals
