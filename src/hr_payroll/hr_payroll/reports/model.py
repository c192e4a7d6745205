"""Response-shaped report values.

Everything is accumulated at full precision; rounding to two places happens in
`to_dict` only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

NOT_AVAILABLE = "N/A"


def _r2(value: float) -> float:
    return round(value, 2)


def percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return min(100.0, part / whole * 100)


def growth_of(current: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


@dataclass
class DailyAttendance:
    work_date: date
    total: int
    present: int = 0
    late: int = 0

    @property
    def absent(self) -> int:
        return max(0, self.total - self.present)

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.isoformat(),
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "total": self.total,
        }


@dataclass
class EmployeeAttendance:
    employee_id: int
    name: str
    days_present: int = 0
    total_hours: float = 0.0
    working_days: int = 0

    @property
    def days_absent(self) -> int:
        return max(0, self.working_days - self.days_present)

    @property
    def attendance_rate(self) -> float:
        return percent(self.days_present, self.working_days)

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "name": self.name,
            "daysPresent": self.days_present,
            "daysAbsent": self.days_absent,
            "attendanceRate": _r2(self.attendance_rate),
            "totalHours": _r2(self.total_hours),
        }


@dataclass(frozen=True)
class AttendanceTrend:
    week_start: date
    attendance_rate: float
    total_hours: float

    def to_dict(self) -> dict:
        return {
            "period": self.week_start.strftime("%b %d"),
            "attendanceRate": _r2(self.attendance_rate),
            "totalHours": _r2(self.total_hours),
        }


@dataclass(frozen=True)
class AttendancePatterns:
    most_active_day: Optional[str] = None
    least_active_day: Optional[str] = None
    average_check_in: Optional[str] = None
    average_check_out: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "mostActiveDay": self.most_active_day or NOT_AVAILABLE,
            "leastActiveDay": self.least_active_day or NOT_AVAILABLE,
            "averageCheckInTime": self.average_check_in or NOT_AVAILABLE,
            "averageCheckOutTime": self.average_check_out or NOT_AVAILABLE,
        }


def empty_status_counts() -> dict[str, int]:
    return {"draft": 0, "submitted": 0, "approved": 0, "rejected": 0}


@dataclass
class EmployeeTimesheet:
    employee_id: int
    name: str
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    total_earnings: float = 0.0
    status_counts: dict[str, int] = field(default_factory=empty_status_counts)

    @property
    def regular_earnings(self) -> float:
        """Regular share of earnings at the inferred rate totalEarnings / totalHours.

        Approximate: with overtime the inferred rate is above the base rate, so
        some overtime premium lands in the regular bucket.
        """
        if self.total_hours <= 0 or self.total_earnings <= 0:
            return 0.0
        return self.regular_hours * (self.total_earnings / self.total_hours)

    def to_dict(self) -> dict:
        return {
            "employeeId": self.employee_id,
            "name": self.name,
            "totalHours": _r2(self.total_hours),
            "regularHours": _r2(self.regular_hours),
            "overtimeHours": _r2(self.overtime_hours),
            "totalEarnings": _r2(self.total_earnings),
            "statusCounts": dict(self.status_counts),
        }


@dataclass(frozen=True)
class TimesheetTrend:
    week_start: date
    total_hours: float
    approved_hours: float
    average_hours: float

    def to_dict(self) -> dict:
        return {
            "period": self.week_start.strftime("%b %d"),
            "totalHours": _r2(self.total_hours),
            "approvedHours": _r2(self.approved_hours),
            "averageHours": _r2(self.average_hours),
        }


@dataclass(frozen=True)
class PeriodTotals:
    """Attendance totals for one window; computed for both current and previous period."""

    working_days: int = 0
    present_days: int = 0
    possible_days: int = 0
    total_hours: float = 0.0

    @property
    def attendance_rate(self) -> float:
        return percent(self.present_days, self.possible_days)


@dataclass
class PeriodReport:
    start: date
    end: date
    employee_count: int = 0
    current: PeriodTotals = field(default_factory=PeriodTotals)
    previous: PeriodTotals = field(default_factory=PeriodTotals)
    daily: list[DailyAttendance] = field(default_factory=list)
    employees: list[EmployeeAttendance] = field(default_factory=list)
    trends: list[AttendanceTrend] = field(default_factory=list)
    patterns: AttendancePatterns = field(default_factory=AttendancePatterns)
    status_counts: dict[str, int] = field(default_factory=empty_status_counts)
    timesheets: list[EmployeeTimesheet] = field(default_factory=list)
    timesheet_trends: list[TimesheetTrend] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    missing_rates: list[int] = field(default_factory=list)

    @property
    def growth(self) -> float:
        return growth_of(self.current.total_hours, self.previous.total_hours)

    @property
    def total_earnings(self) -> float:
        return sum(t.total_earnings for t in self.timesheets)

    @property
    def regular_earnings(self) -> float:
        return sum(t.regular_earnings for t in self.timesheets)

    @property
    def overtime_earnings(self) -> float:
        return max(0.0, self.total_earnings - self.regular_earnings)

    def _per_employee(self, value: float) -> float:
        return value / self.employee_count if self.employee_count else 0.0

    def to_dict(self) -> dict:
        total_earnings = self.total_earnings
        return {
            "summary": {
                "totalEmployees": self.employee_count,
                "attendanceRate": _r2(self.current.attendance_rate),
                "totalHours": _r2(self.current.total_hours),
                "growth": _r2(self.growth),
                "averageHoursPerEmployee": _r2(self._per_employee(self.current.total_hours)),
                "totalEarnings": _r2(total_earnings),
            },
            "attendance": {
                "dailyBreakdown": [d.to_dict() for d in self.daily],
                "employeeBreakdown": [e.to_dict() for e in self.employees],
                "trends": [t.to_dict() for t in self.trends],
                "patterns": self.patterns.to_dict(),
            },
            "timesheets": {
                "statusBreakdown": dict(self.status_counts),
                "employeeBreakdown": [t.to_dict() for t in self.timesheets],
                "trends": [t.to_dict() for t in self.timesheet_trends],
                "earnings": {
                    "totalEarnings": _r2(total_earnings),
                    "regularEarnings": _r2(self.regular_earnings),
                    "overtimeEarnings": _r2(self.overtime_earnings),
                    "averageEarningsPerEmployee": _r2(self._per_employee(total_earnings)),
                },
            },
            "comparisons": {
                "previousPeriod": {
                    "attendanceRate": _r2(self.previous.attendance_rate),
                    "totalHours": _r2(self.previous.total_hours),
                    "growth": _r2(self.growth),
                },
            },
            "errors": list(self.errors),
            "missingRates": list(self.missing_rates),
        }
