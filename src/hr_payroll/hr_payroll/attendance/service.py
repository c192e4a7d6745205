from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import end_of_day
from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, PunchEvent
from .notes_codec import AttendanceNotes
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _notes_of(record: AttendanceRecord) -> AttendanceNotes:
    return AttendanceNotes(
        punches=record.effective_punches(),
        first_check_in=record.first_check_in or record.check_in_time,
        user_notes=record.user_notes,
        auto_checked_out=record.auto_checked_out,
    )


class AttendanceService:
    """Check-in / check-out with multi-segment history.

    A day may hold several segments: checking in after a check-out opens a new
    one. Every method takes `now` explicitly.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        workday_start: Optional[time] = None,
        grace_minutes: int = 5,
    ):
        self._attendance = attendance
        self._employees = employees
        self._workday_start = workday_start
        self._grace_minutes = int(grace_minutes)

    def _status_for_checkin(self, now: datetime) -> AttendanceStatus:
        if self._workday_start is None:
            return AttendanceStatus.PRESENT
        start = datetime.combine(now.date(), self._workday_start)
        if now <= start + timedelta(minutes=self._grace_minutes):
            return AttendanceStatus.PRESENT
        return AttendanceStatus.LATE

    def check_in(self, employee_id: int, *, now: datetime, notes: Optional[str] = None) -> AttendanceRecord:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        self.auto_checkout_previous_days(employee_id, now=now)

        today = now.date()
        existing = self._attendance.find_by_employee_and_date(employee_id, today)
        if existing is None:
            fresh = AttendanceNotes(
                punches=(PunchEvent(PunchType.IN, now),),
                first_check_in=now,
                user_notes=(notes or "").strip() or None,
            )
            self._attendance.create_checkin(
                employee_id=employee_id,
                work_date=today,
                check_in_time=now,
                status=self._status_for_checkin(now),
                notes=fresh,
            )
            return self._reload(employee_id, today)

        if existing.is_open:
            raise ValidationError("Already checked in. Please check out first.")

        current = _notes_of(existing)
        updated = replace(
            current,
            punches=current.punches + (PunchEvent(PunchType.IN, now),),
            first_check_in=current.first_check_in or now,
            user_notes=(notes or "").strip() or current.user_notes,
        )
        self._attendance.save_punches(
            attendance_id=existing.attendance_id,
            check_in_time=now,
            check_out_time=None,
            notes=updated,
        )
        return self._reload(employee_id, today)

    def check_out(self, employee_id: int, *, now: datetime, notes: Optional[str] = None) -> AttendanceRecord:
        today = now.date()
        record = self._attendance.find_by_employee_and_date(employee_id, today)
        if record is None or record.check_in_time is None:
            raise ValidationError("Please check in first before checking out")

        current = _notes_of(record)
        updated = replace(
            current,
            punches=current.punches + (PunchEvent(PunchType.OUT, now),),
            user_notes=(notes or "").strip() or current.user_notes,
        )
        self._attendance.save_punches(
            attendance_id=record.attendance_id,
            check_in_time=record.check_in_time,
            check_out_time=now,
            notes=updated,
        )
        return self._reload(employee_id, today)

    def auto_checkout_previous_days(self, employee_id: int, *, now: datetime) -> int:
        """Close segments left open on earlier days at 23:59:59 of that day."""
        closed = 0
        for record in self._attendance.find_open_before(employee_id, now.date()):
            checkout = end_of_day(record.work_date)
            current = _notes_of(record)
            updated = replace(
                current,
                punches=current.punches + (PunchEvent(PunchType.OUT, checkout),),
                auto_checked_out=True,
            )
            self._attendance.save_punches(
                attendance_id=record.attendance_id,
                check_in_time=record.check_in_time,
                check_out_time=checkout,
                notes=updated,
            )
            closed += 1
        if closed:
            logger.info("Auto-checked out %s open day(s) for employee %s", closed, employee_id)
        return closed

    def _reload(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.find_by_employee_and_date(employee_id, work_date)
        if record is None:
            raise NotFoundError("Attendance record not found")
        return record
