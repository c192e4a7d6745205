from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.concurrency import fan_out
from ..common.datetime_utils import month_bounds
from ..common.validators import require_month_year, require_valid_range
from ..core.constants import DEFAULT_MAX_WORKERS
from ..core.enums import UpsertResult
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .enricher import TimesheetEnricher
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


@dataclass
class BatchGenerationReport:
    details: list[tuple[int, GenerationResult]] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return len(self.details)

    def to_dict(self) -> dict:
        results = [r for _, r in self.details]
        return {
            "totalProcessed": self.total_processed,
            "totalCreated": sum(r.created for r in results),
            "totalUpdated": sum(r.updated for r in results),
            "totalSkipped": sum(r.skipped for r in results),
            "totalErrors": sum(len(r.errors) for r in results),
            "details": [{"employeeId": emp_id, "result": r.to_dict()} for emp_id, r in self.details],
        }


class MonthlyTimesheetGenerator:
    """Materialize timesheet rows from enriched days.

    Runs converge: re-running the same month and scope updates rows in place and
    never duplicates them. APPROVED/REJECTED rows are skipped, provisional
    (still clocked-in) days and empty days are not written.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        timesheets: TimesheetRepository,
        enricher: TimesheetEnricher,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._employees = employees
        self._timesheets = timesheets
        self._enricher = enricher
        self._max_workers = int(max_workers)

    def generate(
        self,
        month: int,
        year: int,
        organization_id: Optional[int] = None,
        *,
        now: datetime,
    ) -> BatchGenerationReport:
        month, year = require_month_year(month, year)
        start, end = month_bounds(month, year)
        employees = self._employees.list_active(organization_id=organization_id)

        outcomes = fan_out(
            employees,
            lambda emp: self._generate_for(emp, start, end, now=now),
            max_workers=self._max_workers,
            key=lambda emp: emp.employee_id,
        )

        report = BatchGenerationReport()
        for outcome in outcomes:
            if outcome.ok:
                report.details.append((outcome.key, outcome.value))
                continue
            logger.error("Timesheet generation failed for employee %s", outcome.key, exc_info=outcome.error)
            report.details.append((outcome.key, GenerationResult(errors=[{"date": None, "error": str(outcome.error)}])))

        summary = report.to_dict()
        logger.info(
            "Generated timesheets for %02d/%s (organization=%s): processed=%s created=%s updated=%s skipped=%s errors=%s",
            month,
            year,
            organization_id,
            summary["totalProcessed"],
            summary["totalCreated"],
            summary["totalUpdated"],
            summary["totalSkipped"],
            summary["totalErrors"],
        )
        return report

    def generate_for_employee(self, employee_id: int, start: date, end: date, *, now: datetime) -> GenerationResult:
        require_valid_range(start, end)
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return self._generate_for(employee, start, end, now=now)

    def generate_month_for_employee(self, employee_id: int, month: int, year: int, *, now: datetime) -> GenerationResult:
        month, year = require_month_year(month, year)
        start, end = month_bounds(month, year)
        return self.generate_for_employee(employee_id, start, end, now=now)

    def _generate_for(self, employee: Employee, start: date, end: date, *, now: datetime) -> GenerationResult:
        result = GenerationResult()
        entries = self._enricher.enrich_employee(employee, start, end, now=now)

        for entry in entries:
            if not entry.has_work or entry.provisional:
                continue
            try:
                outcome = self._timesheets.upsert(employee.employee_id, entry.work_date, entry.to_timesheet_fields())
            except Exception as exc:
                logger.exception(
                    "Failed to write timesheet for employee %s on %s", employee.employee_id, entry.work_date
                )
                result.errors.append({"date": entry.work_date.isoformat(), "error": str(exc)})
                continue

            if outcome == UpsertResult.CREATED:
                result.created += 1
            elif outcome == UpsertResult.UPDATED:
                result.updated += 1
            else:
                result.skipped += 1
        return result
