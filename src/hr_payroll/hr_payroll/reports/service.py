from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.hours import HoursCalculator
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.concurrency import fan_out
from ..common.datetime_utils import count_working_days, format_minutes, iter_days, minutes_since_midnight, monday_weeks
from ..common.validators import require_valid_range
from ..core.constants import DEFAULT_MAX_WORKERS
from ..core.enums import AttendanceStatus, Role, TimesheetStatus
from ..core.exceptions import StoreUnavailableError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..timesheets.enricher import TimesheetEnricher
from ..timesheets.model import EnrichedTotals, TimesheetRecord
from ..timesheets.repository import TimesheetRepository
from .model import (
    AttendancePatterns,
    AttendanceTrend,
    DailyAttendance,
    EmployeeAttendance,
    EmployeeTimesheet,
    PeriodReport,
    PeriodTotals,
    TimesheetTrend,
    percent,
)
from .periods import previous_period, resolve_period

logger = logging.getLogger(__name__)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(frozen=True)
class _EmployeeData:
    attendance: tuple[AttendanceRecord, ...]
    previous_attendance: tuple[AttendanceRecord, ...]
    timesheets: tuple[TimesheetRecord, ...]


def _present(records) -> list[AttendanceRecord]:
    return [r for r in records if r.check_in_time is not None]


def _in_window(records, start: date, end: date) -> list:
    return [r for r in records if start <= r.work_date <= end]


class PeriodReportAggregator:
    """Attendance, timesheet and earnings report for a set of employees and a window.

    Per-employee loads and enrichment fan out in parallel. A failing employee
    contributes zero and is listed in `errors`; a store outage fails the whole
    report.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        timesheets: TimesheetRepository,
        enricher: TimesheetEnricher,
        *,
        hours: Optional[HoursCalculator] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._employees = employees
        self._attendance = attendance
        self._timesheets = timesheets
        self._enricher = enricher
        self._hours = hours or HoursCalculator()
        self._max_workers = int(max_workers)

    def aggregate(self, employee_ids: Sequence[int], start: date, end: date, *, now: datetime) -> PeriodReport:
        require_valid_range(start, end)
        if not employee_ids:
            return PeriodReport(start=start, end=end)

        order = {emp_id: i for i, emp_id in enumerate(employee_ids)}
        employees = sorted(self._employees.get_many(list(employee_ids)), key=lambda e: order.get(e.employee_id, 0))
        report = PeriodReport(start=start, end=end, employee_count=len(employees))
        if not employees:
            return report

        prev_start, prev_end = previous_period(start, end)
        loaded = self._load_all(employees, start, end, prev_start, prev_end, report)

        current = [r for data in loaded.values() for r in data.attendance]
        previous = [r for data in loaded.values() for r in data.previous_attendance]
        sheets = [t for data in loaded.values() for t in data.timesheets]

        report.current = self._totals(current, len(employees), start, end)
        report.previous = self._totals(previous, len(employees), prev_start, prev_end)
        report.daily = self._daily(current, len(employees), start, end)
        report.employees = self._employee_attendance(employees, loaded, report.current.working_days)
        report.trends = self._attendance_trends(current, len(employees), start, end)
        report.patterns = self._patterns(current)

        for sheet in sheets:
            report.status_counts[sheet.status.value.lower()] += 1
        report.timesheet_trends = self._timesheet_trends(sheets, start, end)
        report.timesheets = self._employee_timesheets(employees, loaded, start, end, now, report)
        return report

    def _load_all(self, employees, start, end, prev_start, prev_end, report) -> dict[int, _EmployeeData]:
        def load(employee: Employee) -> _EmployeeData:
            emp_id = employee.employee_id
            return _EmployeeData(
                attendance=tuple(self._attendance.find_by_employee_and_date_range(emp_id, start, end)),
                previous_attendance=tuple(self._attendance.find_by_employee_and_date_range(emp_id, prev_start, prev_end)),
                timesheets=tuple(self._timesheets.find_by_employee_and_date_range(emp_id, start, end)),
            )

        loaded = {}
        for outcome in fan_out(employees, load, max_workers=self._max_workers, key=lambda e: e.employee_id):
            if outcome.ok:
                loaded[outcome.key] = outcome.value
                continue
            if isinstance(outcome.error, StoreUnavailableError):
                raise outcome.error
            logger.error("Failed to load report data for employee %s", outcome.key, exc_info=outcome.error)
            report.errors.append({"employeeId": outcome.key, "error": str(outcome.error)})
        return loaded

    def _record_hours(self, records) -> float:
        return sum(self._hours.for_record(r).worked_hours for r in records)

    def _totals(self, records, employee_count: int, start: date, end: date) -> PeriodTotals:
        working_days = count_working_days(start, end)
        return PeriodTotals(
            working_days=working_days,
            present_days=len(_present(records)),
            possible_days=employee_count * working_days,
            total_hours=self._record_hours(records),
        )

    def _daily(self, records, employee_count: int, start: date, end: date) -> list[DailyAttendance]:
        days = {day: DailyAttendance(work_date=day, total=employee_count) for day in iter_days(start, end)}
        for record in _present(records):
            bucket = days.get(record.work_date)
            if bucket is None:
                continue
            bucket.present += 1
            if record.status == AttendanceStatus.LATE:
                bucket.late += 1
        return list(days.values())

    def _employee_attendance(self, employees, loaded, working_days: int) -> list[EmployeeAttendance]:
        rows = []
        for employee in employees:
            data = loaded.get(employee.employee_id)
            records = data.attendance if data else ()
            rows.append(
                EmployeeAttendance(
                    employee_id=employee.employee_id,
                    name=employee.full_name,
                    days_present=len(_present(records)),
                    total_hours=self._record_hours(records),
                    working_days=working_days,
                )
            )
        return rows

    def _attendance_trends(self, records, employee_count: int, start: date, end: date) -> list[AttendanceTrend]:
        trends = []
        for week_start, week_end in monday_weeks(start, end):
            week = _in_window(records, week_start, week_end)
            possible = employee_count * count_working_days(week_start, week_end)
            trends.append(
                AttendanceTrend(
                    week_start=week_start,
                    attendance_rate=percent(len(_present(week)), possible),
                    total_hours=self._record_hours(week),
                )
            )
        return trends

    @staticmethod
    def _patterns(records) -> AttendancePatterns:
        present = _present(records)
        if not present:
            return AttendancePatterns()

        by_weekday = Counter(r.check_in_time.weekday() for r in present)
        # Ties go to the earlier weekday.
        active = [d for d in range(7) if by_weekday[d]]
        most = max(active, key=lambda d: (by_weekday[d], -d))
        least = min(active, key=lambda d: (by_weekday[d], d))

        check_ins = [minutes_since_midnight(r.check_in_time) for r in present]
        check_outs = [minutes_since_midnight(r.check_out_time) for r in records if r.check_out_time is not None]
        avg_in = sum(check_ins) / len(check_ins)
        avg_out = sum(check_outs) / len(check_outs) if check_outs else 0

        return AttendancePatterns(
            most_active_day=DAY_NAMES[most],
            least_active_day=DAY_NAMES[least],
            average_check_in=format_minutes(avg_in) if avg_in > 0 else None,
            average_check_out=format_minutes(avg_out) if avg_out > 0 else None,
        )

    @staticmethod
    def _timesheet_trends(sheets, start: date, end: date) -> list[TimesheetTrend]:
        trends = []
        for week_start, week_end in monday_weeks(start, end):
            week = _in_window(sheets, week_start, week_end)
            total = sum(t.fields.hours for t in week)
            approved = sum(t.fields.hours for t in week if t.status == TimesheetStatus.APPROVED)
            trends.append(
                TimesheetTrend(
                    week_start=week_start,
                    total_hours=total,
                    approved_hours=approved,
                    average_hours=total / len(week) if week else 0.0,
                )
            )
        return trends

    def _employee_timesheets(self, employees, loaded, start, end, now, report) -> list[EmployeeTimesheet]:
        rows = {e.employee_id: EmployeeTimesheet(employee_id=e.employee_id, name=e.full_name) for e in employees}

        for emp_id, data in loaded.items():
            for sheet in data.timesheets:
                rows[emp_id].status_counts[sheet.status.value.lower()] += 1

        # Employees whose data failed to load are already listed in errors.
        loadable = [e for e in employees if e.employee_id in loaded]
        for outcome in self._enricher.enrich_many(loadable, start, end, now=now):
            if not outcome.ok:
                if isinstance(outcome.error, StoreUnavailableError):
                    raise outcome.error
                report.errors.append({"employeeId": outcome.key, "error": str(outcome.error)})
                continue
            entries = outcome.value
            totals = EnrichedTotals.of(entries)
            row = rows[outcome.key]
            row.total_hours = totals.total_hours
            row.regular_hours = totals.regular_hours
            row.overtime_hours = totals.overtime_hours
            row.total_earnings = totals.total_earnings
            if any(e.rate_missing and e.hours > 0 for e in entries):
                report.missing_rates.append(outcome.key)

        return list(rows.values())


class ReportService:
    """Role scoping and period selection in front of the aggregator."""

    def __init__(self, employees: EmployeeRepository, aggregator: PeriodReportAggregator):
        self._employees = employees
        self._aggregator = aggregator

    def scope_employee_ids(self, *, role: Role, company_id: Optional[int], user_id: int) -> list[int]:
        if role == Role.SUPER_ADMIN:
            return [e.employee_id for e in self._employees.list_active()]
        if role in (Role.COMPANY_ADMIN, Role.MANAGER, Role.TEAM_LEAD):
            if company_id is None:
                raise ValidationError("No company associated with this account")
            return [e.employee_id for e in self._employees.list_active(organization_id=company_id)]
        employee = self._employees.get_by_id(user_id)
        return [employee.employee_id] if employee else []

    def build(
        self,
        *,
        role: Role,
        company_id: Optional[int],
        user_id: int,
        now: datetime,
        period: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PeriodReport:
        start, end = resolve_period(period, start, end, today=now.date())
        employee_ids = self.scope_employee_ids(role=role, company_id=company_id, user_id=user_id)
        return self._aggregator.aggregate(employee_ids, start, end, now=now)
