from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall
from .model import TaskLog
from .repository import TaskLogRepository


class MySQLTaskLogRepository(TaskLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[TaskLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tl.task_log_id, tl.employee_id, tl.work_date, tl.task_id,
                       COALESCE(t.title, '') AS task_title, tl.hours, tl.description
                FROM task_logs tl
                LEFT JOIN tasks t ON t.task_id = tl.task_id
                WHERE tl.employee_id=%s AND tl.work_date BETWEEN %s AND %s
                ORDER BY tl.work_date ASC, tl.task_log_id ASC
                """,
                (int(employee_id), start, end),
            )
            return [
                TaskLog(
                    task_log_id=int(r["task_log_id"]),
                    employee_id=int(r["employee_id"]),
                    work_date=r["work_date"],
                    task_id=r.get("task_id"),
                    task_title=r["task_title"],
                    hours=as_float(r.get("hours")) or 0.0,
                    description=r.get("description"),
                )
                for r in fetchall(cur)
            ]
