from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord
from .notes_codec import AttendanceNotes


class AttendanceRepository(Protocol):
    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records for one employee with start <= work_date <= end, ordered by work_date."""

        raise NotImplementedError

    def find_by_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_before(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        """Records before work_date that have a check-in but no check-out."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        notes: AttendanceNotes,
    ) -> int:
        raise NotImplementedError

    def save_punches(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        notes: AttendanceNotes,
    ) -> bool:
        """Persist check-in/out columns and the punch history as one update."""

        raise NotImplementedError
