from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PaymentType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone, in_clause
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, email, organization_id, role,
    payment_type, hourly_rate, monthly_salary, is_active
"""


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        email=r["email"],
        organization_id=r.get("organization_id"),
        role=Role(r["role"]),
        payment_type=PaymentType(r["payment_type"]) if r.get("payment_type") else None,
        hourly_rate=as_float(r.get("hourly_rate")),
        monthly_salary=as_float(r.get("monthly_salary")),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_many(self, employee_ids: Sequence[int]) -> Sequence[Employee]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_id IN ({in_clause(employee_ids)}) ORDER BY employee_id",
                tuple(int(i) for i in employee_ids),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_active(self, *, organization_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = ["is_active=1", "role<>%s"]
        params: list[object] = [Role.SUPER_ADMIN.value]
        if organization_id is not None:
            clauses.append("organization_id=%s")
            params.append(int(organization_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where} ORDER BY employee_id", tuple(params))
            return [_row_to_employee(r) for r in fetchall(cur)]
