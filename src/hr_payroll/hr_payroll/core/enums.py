from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role, used to scope which employees a report covers."""

    SUPER_ADMIN = "SUPER_ADMIN"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    MANAGER = "MANAGER"
    TEAM_LEAD = "TEAM_LEAD"
    EMPLOYEE = "EMPLOYEE"


class PaymentType(str, Enum):
    HOURLY = "HOURLY"
    SALARY = "SALARY"


class AttendanceStatus(str, Enum):
    """Attendance status stored with each daily record."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"


class TimesheetStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    @property
    def is_final(self) -> bool:
        return self in (TimesheetStatus.APPROVED, TimesheetStatus.REJECTED)


class PunchType(str, Enum):
    IN = "in"
    OUT = "out"


class ReportPeriod(str, Enum):
    CURRENT_MONTH = "currentMonth"
    LAST_MONTH = "lastMonth"
    LAST_3_MONTHS = "last3Months"
    LAST_6_MONTHS = "last6Months"
    THIS_YEAR = "thisYear"


class UpsertResult(str, Enum):
    """Outcome of writing one timesheet row."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
