from __future__ import annotations

from datetime import date
from typing import Optional

from ...database.connection import DatabaseConnection
from ...database.mysql_base import as_float, db_cursor, fetchone
from .model import DailyPayrollOverride, OverrideFields
from .repository import OverrideRepository


class MySQLOverrideRepository(OverrideRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, work_date: date) -> Optional[DailyPayrollOverride]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, work_date, hourly_rate, regular_hours, overtime_hours,
                       total_hours, earnings, notes, created_by, updated_at
                FROM daily_payroll_overrides
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return DailyPayrollOverride(
                employee_id=int(r["employee_id"]),
                work_date=r["work_date"],
                fields=OverrideFields(
                    hourly_rate=as_float(r.get("hourly_rate")),
                    regular_hours=as_float(r.get("regular_hours")),
                    overtime_hours=as_float(r.get("overtime_hours")),
                    total_hours=as_float(r.get("total_hours")),
                    earnings=as_float(r.get("earnings")),
                    notes=r.get("notes"),
                    created_by=r.get("created_by"),
                ),
                updated_at=r.get("updated_at"),
            )

    def upsert(self, employee_id: int, work_date: date, fields: OverrideFields) -> None:
        # Single statement: the row is replaced as a whole, concurrent writers to the
        # same key resolve last-write-wins.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_payroll_overrides(
                    employee_id, work_date, hourly_rate, regular_hours, overtime_hours,
                    total_hours, earnings, notes, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    hourly_rate=VALUES(hourly_rate),
                    regular_hours=VALUES(regular_hours),
                    overtime_hours=VALUES(overtime_hours),
                    total_hours=VALUES(total_hours),
                    earnings=VALUES(earnings),
                    notes=VALUES(notes)
                """,
                (
                    int(employee_id),
                    work_date,
                    fields.hourly_rate,
                    fields.regular_hours,
                    fields.overtime_hours,
                    fields.total_hours,
                    fields.earnings,
                    fields.notes,
                    fields.created_by,
                ),
            )

    def delete(self, employee_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM daily_payroll_overrides WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            return cur.rowcount > 0
