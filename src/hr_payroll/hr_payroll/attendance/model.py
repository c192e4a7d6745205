from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, PunchType


@dataclass(frozen=True)
class PunchEvent:
    """One clock-in or clock-out instant."""

    kind: PunchType
    at: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day.

    `check_in_time` is the latest check-in of the day (a re-check-in moves it) and
    `check_out_time` is cleared while a segment is open. The full day is kept in
    `punches`, in the order they were recorded.
    """

    attendance_id: int
    employee_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    punches: tuple[PunchEvent, ...] = field(default_factory=tuple)
    first_check_in: Optional[datetime] = None
    user_notes: Optional[str] = None
    auto_checked_out: bool = False

    @property
    def is_open(self) -> bool:
        return self.check_in_time is not None and self.check_out_time is None

    def effective_punches(self) -> tuple[PunchEvent, ...]:
        """Punch history, synthesized from check-in/out when none was recorded."""
        if self.punches:
            return self.punches
        events = []
        if self.check_in_time is not None:
            events.append(PunchEvent(PunchType.IN, self.check_in_time))
        if self.check_out_time is not None:
            events.append(PunchEvent(PunchType.OUT, self.check_out_time))
        return tuple(events)

    def snapshot(self) -> dict:
        return {
            "checkInTime": self.check_in_time.isoformat() if self.check_in_time else None,
            "checkOutTime": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "notes": self.user_notes,
        }
