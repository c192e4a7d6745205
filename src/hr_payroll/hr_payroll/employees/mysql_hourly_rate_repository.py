from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import HourlyRatePeriod
from .repository import HourlyRatePeriodRepository

_COLUMNS = "period_id, employee_id, start_date, end_date, hourly_rate, created_by"


def _row_to_period(r: dict) -> HourlyRatePeriod:
    return HourlyRatePeriod(
        period_id=int(r["period_id"]),
        employee_id=int(r["employee_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        hourly_rate=as_float(r["hourly_rate"]),
        created_by=r.get("created_by"),
    )


class MySQLHourlyRatePeriodRepository(HourlyRatePeriodRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, period_id: int) -> Optional[HourlyRatePeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM hourly_rate_periods WHERE period_id=%s", (int(period_id),))
            r = fetchone(cur)
            return _row_to_period(r) if r else None

    def list_for_employees(
        self,
        employee_ids: Optional[Sequence[int]],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[HourlyRatePeriod]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({in_clause(employee_ids)})")
            params.extend(int(i) for i in employee_ids)
        if start is not None:
            clauses.append("end_date>=%s")
            params.append(start)
        if end is not None:
            clauses.append("start_date<=%s")
            params.append(end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM hourly_rate_periods {where} ORDER BY start_date DESC, period_id DESC",
                tuple(params),
            )
            return [_row_to_period(r) for r in fetchall(cur)]

    def create(
        self,
        employee_id: int,
        start_date: date,
        end_date: date,
        hourly_rate: float,
        *,
        created_by: Optional[int] = None,
    ) -> HourlyRatePeriod:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO hourly_rate_periods(employee_id, start_date, end_date, hourly_rate, created_by)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(employee_id), start_date, end_date, float(hourly_rate), created_by),
            )
            period_id = int(cur.lastrowid)
        return HourlyRatePeriod(
            period_id=period_id,
            employee_id=int(employee_id),
            start_date=start_date,
            end_date=end_date,
            hourly_rate=float(hourly_rate),
            created_by=created_by,
        )

    def update(self, period: HourlyRatePeriod) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE hourly_rate_periods SET start_date=%s, end_date=%s, hourly_rate=%s WHERE period_id=%s",
                (period.start_date, period.end_date, float(period.hourly_rate), int(period.period_id)),
            )

    def delete(self, period_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM hourly_rate_periods WHERE period_id=%s", (int(period_id),))
            return cur.rowcount > 0
