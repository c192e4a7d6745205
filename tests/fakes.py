"""In-memory stores and record builders shared by the test suite."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

from src.hr_payroll.hr_payroll.attendance.model import AttendanceRecord, PunchEvent
from src.hr_payroll.hr_payroll.attendance.notes_codec import AttendanceNotes
from src.hr_payroll.hr_payroll.core.enums import AttendanceStatus, PaymentType, PunchType, Role, TimesheetStatus, UpsertResult
from src.hr_payroll.hr_payroll.employees.model import Employee, HourlyRatePeriod
from src.hr_payroll.hr_payroll.payroll.overrides.model import DailyPayrollOverride, OverrideFields
from src.hr_payroll.hr_payroll.payroll.overtime_config import OvertimeConfig
from src.hr_payroll.hr_payroll.timesheets.model import TimesheetFields, TimesheetRecord


def at(day: date, hhmm: str) -> datetime:
    hour, minute = hhmm.split(":")
    return datetime.combine(day, time(int(hour), int(minute)))


def make_employee(
    employee_id: int,
    *,
    hourly_rate: Optional[float] = 20.0,
    monthly_salary: Optional[float] = None,
    payment_type: PaymentType = PaymentType.HOURLY,
    organization_id: Optional[int] = 1,
    role: Role = Role.EMPLOYEE,
    is_active: bool = True,
) -> Employee:
    return Employee(
        employee_id=employee_id,
        full_name=f"Employee {employee_id}",
        email=f"e{employee_id}@example.com",
        organization_id=organization_id,
        role=role,
        payment_type=payment_type,
        hourly_rate=hourly_rate,
        monthly_salary=monthly_salary,
        is_active=is_active,
    )


class InMemoryEmployees:
    def __init__(self, employees=()):
        self._by_id = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> Employee:
        self._by_id[employee.employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_many(self, employee_ids):
        return [self._by_id[i] for i in employee_ids if i in self._by_id]

    def list_active(self, *, organization_id: Optional[int] = None):
        return [
            e
            for _, e in sorted(self._by_id.items())
            if e.is_active
            and e.role != Role.SUPER_ADMIN
            and (organization_id is None or e.organization_id == organization_id)
        ]


class InMemoryAttendance:
    def __init__(self):
        self._by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.fail_for: dict[int, Exception] = {}

    def _check(self, employee_id: int) -> None:
        if employee_id in self.fail_for:
            raise self.fail_for[employee_id]

    def add_day(
        self,
        employee_id: int,
        day: date,
        check_in: Optional[str] = "09:00",
        check_out: Optional[str] = "17:00",
        *,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        punches: tuple[tuple[str, str], ...] = (),
    ) -> AttendanceRecord:
        """Store a record; `punches` is a sequence of ("in"|"out", "HH:MM")."""
        self._id += 1
        record = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            work_date=day,
            check_in_time=at(day, check_in) if check_in else None,
            check_out_time=at(day, check_out) if check_out else None,
            status=status,
            punches=tuple(PunchEvent(PunchType(kind), at(day, hhmm)) for kind, hhmm in punches),
        )
        self._by_key[(employee_id, day)] = record
        return record

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date):
        self._check(employee_id)
        return sorted(
            (r for (emp, day), r in self._by_key.items() if emp == employee_id and start <= day <= end),
            key=lambda r: r.work_date,
        )

    def find_by_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        self._check(employee_id)
        return self._by_key.get((employee_id, work_date))

    def find_open_before(self, employee_id: int, work_date: date):
        return [
            r
            for r in self.find_by_employee_and_date_range(employee_id, date.min, work_date)
            if r.work_date < work_date and r.is_open
        ]

    def create_checkin(self, *, employee_id, work_date, check_in_time, status, notes: AttendanceNotes) -> int:
        self._id += 1
        self._by_key[(employee_id, work_date)] = AttendanceRecord(
            attendance_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
            punches=notes.punches,
            first_check_in=notes.first_check_in,
            user_notes=notes.user_notes,
            auto_checked_out=notes.auto_checked_out,
        )
        return self._id

    def save_punches(self, *, attendance_id, check_in_time, check_out_time, notes: AttendanceNotes) -> bool:
        for key, record in self._by_key.items():
            if record.attendance_id == attendance_id:
                self._by_key[key] = replace(
                    record,
                    check_in_time=check_in_time,
                    check_out_time=check_out_time,
                    punches=notes.punches,
                    first_check_in=notes.first_check_in,
                    user_notes=notes.user_notes,
                    auto_checked_out=notes.auto_checked_out,
                )
                return True
        return False


class InMemoryOverrides:
    def __init__(self):
        self._by_key: dict[tuple[int, date], DailyPayrollOverride] = {}

    def get(self, employee_id: int, work_date: date) -> Optional[DailyPayrollOverride]:
        return self._by_key.get((employee_id, work_date))

    def upsert(self, employee_id: int, work_date: date, fields: OverrideFields) -> None:
        self._by_key[(employee_id, work_date)] = DailyPayrollOverride(employee_id, work_date, fields)

    def delete(self, employee_id: int, work_date: date) -> bool:
        return self._by_key.pop((employee_id, work_date), None) is not None


class InMemoryTimesheets:
    def __init__(self):
        self._by_key: dict[tuple[int, date], TimesheetRecord] = {}
        self._id = 0

    def all(self) -> list[TimesheetRecord]:
        return list(self._by_key.values())

    def set_status(self, employee_id: int, work_date: date, status: TimesheetStatus) -> None:
        key = (employee_id, work_date)
        self._by_key[key] = replace(self._by_key[key], status=status)

    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetRecord]:
        return self._by_key.get((employee_id, work_date))

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date):
        return sorted(
            (t for (emp, day), t in self._by_key.items() if emp == employee_id and start <= day <= end),
            key=lambda t: t.work_date,
        )

    def upsert(self, employee_id: int, work_date: date, fields: TimesheetFields) -> UpsertResult:
        key = (employee_id, work_date)
        existing = self._by_key.get(key)
        if existing is None:
            self._id += 1
            self._by_key[key] = TimesheetRecord(self._id, employee_id, work_date, TimesheetStatus.DRAFT, fields)
            return UpsertResult.CREATED
        if existing.status.is_final:
            return UpsertResult.SKIPPED
        self._by_key[key] = replace(existing, fields=fields)
        return UpsertResult.UPDATED


class InMemoryTaskLogs:
    def __init__(self, logs=()):
        self.logs = list(logs)

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date):
        return [t for t in self.logs if t.employee_id == employee_id and start <= t.work_date <= end]


class InMemoryOvertimeConfigs:
    def __init__(self, configs=()):
        self.configs: list[OvertimeConfig] = list(configs)

    def list_for(self, *, employee_id: int, organization_id: Optional[int]):
        return [
            c
            for c in self.configs
            if c.employee_id == employee_id
            or (c.employee_id is None and organization_id is not None and c.organization_id == organization_id)
        ]


class InMemoryHourlyRates:
    def __init__(self):
        self._by_id: dict[int, HourlyRatePeriod] = {}
        self._id = 0
        self.lookups = 0

    def add(self, employee_id: int, start: date, end: date, hourly_rate: float) -> HourlyRatePeriod:
        return self.create(employee_id, start, end, hourly_rate)

    def get(self, period_id: int) -> Optional[HourlyRatePeriod]:
        return self._by_id.get(int(period_id))

    def list_for_employees(self, employee_ids, *, start: Optional[date] = None, end: Optional[date] = None):
        self.lookups += 1
        return [
            p
            for p in self._by_id.values()
            if (employee_ids is None or p.employee_id in employee_ids)
            and (start is None or p.end_date >= start)
            and (end is None or p.start_date <= end)
        ]

    def create(self, employee_id: int, start_date: date, end_date: date, hourly_rate: float, *, created_by=None):
        self._id += 1
        period = HourlyRatePeriod(self._id, employee_id, start_date, end_date, float(hourly_rate), created_by)
        self._by_id[self._id] = period
        return period

    def update(self, period: HourlyRatePeriod) -> None:
        self._by_id[period.period_id] = period

    def delete(self, period_id: int) -> bool:
        return self._by_id.pop(int(period_id), None) is not None
