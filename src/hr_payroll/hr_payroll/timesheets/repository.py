from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import UpsertResult
from .model import TimesheetFields, TimesheetRecord


class TimesheetRepository(Protocol):
    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetRecord]:
        raise NotImplementedError

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[TimesheetRecord]:
        raise NotImplementedError

    def upsert(self, employee_id: int, work_date: date, fields: TimesheetFields) -> UpsertResult:
        """Create a DRAFT row, or rewrite a DRAFT/SUBMITTED one as a whole.

        APPROVED/REJECTED rows are left untouched and reported as SKIPPED. The
        check and the write happen atomically per (employee_id, work_date).
        """

        raise NotImplementedError
