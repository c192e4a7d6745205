from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.concurrency import Outcome, fan_out
from ..common.datetime_utils import iter_days
from ..common.validators import require_valid_range
from ..core.constants import DEFAULT_MAX_WORKERS
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..payroll.overrides.resolver import DailyOverrideResolver
from ..payroll.overtime_config import OvertimePolicyProvider
from ..tasks.repository import TaskLogRepository
from .model import EnrichedTimesheetEntry

logger = logging.getLogger(__name__)


class TimesheetEnricher:
    """Build one enriched entry per calendar day for an employee and date range.

    Days without attendance or override still get a zero entry; callers that
    need gaps filter on `has_work`. Output is a pure function of stored state
    and the `now` passed in.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        resolver: DailyOverrideResolver,
        overtime: OvertimePolicyProvider,
        task_logs: TaskLogRepository,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._employees = employees
        self._attendance = attendance
        self._resolver = resolver
        self._overtime = overtime
        self._task_logs = task_logs
        self._max_workers = int(max_workers)

    def enrich(
        self,
        employee_id: int,
        start: date,
        end: date,
        *,
        now: Optional[datetime] = None,
    ) -> list[EnrichedTimesheetEntry]:
        require_valid_range(start, end)
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return self.enrich_employee(employee, start, end, now=now)

    def enrich_employee(
        self,
        employee: Employee,
        start: date,
        end: date,
        *,
        now: Optional[datetime] = None,
    ) -> list[EnrichedTimesheetEntry]:
        require_valid_range(start, end)
        employee_id = employee.employee_id

        records = {r.work_date: r for r in self._attendance.find_by_employee_and_date_range(employee_id, start, end)}
        logs_by_day = defaultdict(list)
        for log in self._task_logs.find_by_employee_and_date_range(employee_id, start, end):
            logs_by_day[log.work_date].append(log)
        configs = self._overtime.configs_for(employee)
        rate_periods = self._resolver.rates.periods_for(employee_id, start, end)

        entries = []
        for day in iter_days(start, end):
            record = records.get(day)
            policy = self._overtime.pick(configs, employee, day)
            original, worked = self._resolver.compute(
                employee, day, record, policy, now=now, rate_periods=rate_periods
            )
            resolution = self._resolver.merge(original, self._resolver.overrides.get(employee_id, day), policy)
            entries.append(
                EnrichedTimesheetEntry(
                    employee_id=employee_id,
                    work_date=day,
                    values=resolution.effective,
                    status=record.status if record else None,
                    attendance=record,
                    task_logs=tuple(logs_by_day.get(day, ())),
                    is_override=resolution.is_override,
                    original=resolution.original if resolution.is_override else None,
                    provisional=worked.provisional and not resolution.pins_hours,
                    break_hours=worked.break_hours,
                )
            )

        if any(e.rate_missing and e.hours > 0 for e in entries):
            logger.warning(
                "Employee %s has worked hours between %s and %s but no rate configured; earnings reported as 0",
                employee_id,
                start.isoformat(),
                end.isoformat(),
            )

        entries.sort(key=lambda e: e.work_date)
        return entries

    def enrich_many(
        self,
        employees: Sequence[Employee],
        start: date,
        end: date,
        *,
        now: Optional[datetime] = None,
    ) -> list[Outcome[list[EnrichedTimesheetEntry]]]:
        """Enrich several employees; one failure never aborts the others."""
        require_valid_range(start, end)
        outcomes = fan_out(
            employees,
            lambda emp: self.enrich_employee(emp, start, end, now=now),
            max_workers=self._max_workers,
            key=lambda emp: emp.employee_id,
        )
        for outcome in outcomes:
            if not outcome.ok:
                logger.error(
                    "Failed to enrich timesheets for employee %s",
                    outcome.key,
                    exc_info=outcome.error,
                )
        return outcomes
