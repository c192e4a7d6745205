from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import TimesheetStatus, UpsertResult
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import TimesheetFields, TimesheetRecord
from .repository import TimesheetRepository

_SELECT = """
    SELECT timesheet_id, employee_id, work_date, status, hours, regular_hours,
           overtime_hours, hourly_rate, earnings, attendance_id, notes
    FROM timesheets
"""


def _row_to_timesheet(r: dict) -> TimesheetRecord:
    return TimesheetRecord(
        timesheet_id=int(r["timesheet_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=TimesheetStatus(r["status"]),
        fields=TimesheetFields(
            hours=as_float(r.get("hours")) or 0.0,
            regular_hours=as_float(r.get("regular_hours")) or 0.0,
            overtime_hours=as_float(r.get("overtime_hours")) or 0.0,
            hourly_rate=as_float(r.get("hourly_rate")),
            earnings=as_float(r.get("earnings")) or 0.0,
            attendance_id=r.get("attendance_id"),
            notes=r.get("notes"),
        ),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + "WHERE employee_id=%s AND work_date=%s", (int(employee_id), work_date))
            r = fetchone(cur)
            return _row_to_timesheet(r) if r else None

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[TimesheetRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + "WHERE employee_id=%s AND work_date BETWEEN %s AND %s ORDER BY work_date ASC",
                (int(employee_id), start, end),
            )
            return [_row_to_timesheet(r) for r in fetchall(cur)]

    def upsert(self, employee_id: int, work_date: date, fields: TimesheetFields) -> UpsertResult:
        values = (
            fields.hours,
            fields.regular_hours,
            fields.overtime_hours,
            fields.hourly_rate,
            fields.earnings,
            fields.attendance_id,
            fields.notes,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on (employee_id, work_date) for the rest of the transaction.
            cur.execute(
                "SELECT timesheet_id, status FROM timesheets WHERE employee_id=%s AND work_date=%s FOR UPDATE",
                (int(employee_id), work_date),
            )
            existing = fetchone(cur)
            if existing is None:
                cur.execute(
                    """
                    INSERT INTO timesheets(
                        employee_id, work_date, status, hours, regular_hours, overtime_hours,
                        hourly_rate, earnings, attendance_id, notes
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, TimesheetStatus.DRAFT.value) + values,
                )
                return UpsertResult.CREATED

            if TimesheetStatus(existing["status"]).is_final:
                return UpsertResult.SKIPPED

            cur.execute(
                """
                UPDATE timesheets
                SET hours=%s, regular_hours=%s, overtime_hours=%s, hourly_rate=%s, earnings=%s,
                    attendance_id=%s, notes=COALESCE(%s, notes)
                WHERE timesheet_id=%s
                """,
                values + (int(existing["timesheet_id"]),),
            )
            return UpsertResult.UPDATED
