from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall
from .overtime_config import OvertimeConfig, OvertimeConfigRepository


class MySQLOvertimeConfigRepository(OvertimeConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for(self, *, employee_id: int, organization_id: Optional[int]) -> Sequence[OvertimeConfig]:
        clauses = ["employee_id=%s"]
        params: list[object] = [int(employee_id)]
        if organization_id is not None:
            clauses.append("(employee_id IS NULL AND organization_id=%s)")
            params.append(int(organization_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT config_id, organization_id, employee_id, threshold_hours, multiplier, effective_from
                FROM overtime_configs
                WHERE {" OR ".join(clauses)}
                ORDER BY effective_from ASC
                """,
                tuple(params),
            )
            return [
                OvertimeConfig(
                    config_id=int(r["config_id"]),
                    organization_id=r.get("organization_id"),
                    employee_id=r.get("employee_id"),
                    threshold_hours=as_float(r["threshold_hours"]),
                    multiplier=as_float(r["multiplier"]),
                    effective_from=r["effective_from"],
                )
                for r in fetchall(cur)
            ]
