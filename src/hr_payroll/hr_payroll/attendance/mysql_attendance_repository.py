from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .notes_codec import AttendanceNotes, dump_notes, parse_notes
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, work_date, check_in_time, check_out_time, status, notes
    FROM attendance_records
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    check_in = r.get("check_in_time")
    check_out = r.get("check_out_time")
    notes = parse_notes(r.get("notes"), check_in=check_in, check_out=check_out)
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=check_in,
        check_out_time=check_out,
        status=AttendanceStatus(r["status"]),
        punches=notes.punches,
        first_check_in=notes.first_check_in,
        user_notes=notes.user_notes,
        auto_checked_out=notes.auto_checked_out,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + "WHERE employee_id=%s AND work_date BETWEEN %s AND %s ORDER BY work_date ASC",
                (int(employee_id), start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_by_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + "WHERE employee_id=%s AND work_date=%s", (int(employee_id), work_date))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_open_before(self, employee_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE employee_id=%s AND work_date < %s
                  AND check_in_time IS NOT NULL AND check_out_time IS NULL
                ORDER BY work_date ASC
                """,
                (int(employee_id), work_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        notes: AttendanceNotes,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in_time, status, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, check_in_time, status.value, dump_notes(notes)),
            )
            return int(cur.lastrowid)

    def save_punches(
        self,
        *,
        attendance_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        notes: AttendanceNotes,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (check_in_time, check_out_time, dump_notes(notes), int(attendance_id)),
            )
            return cur.rowcount > 0
