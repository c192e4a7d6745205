"""Apply database/schema.sql and check which payroll tables exist."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..core.exceptions import StoreUnavailableError
from .connection import DBConfig

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "organizations",
    "employees",
    "attendance_records",
    "daily_payroll_overrides",
    "timesheets",
    "tasks",
    "task_logs",
    "overtime_configs",
    "hourly_rate_periods",
)


def schema_statements(sql: str) -> Iterator[str]:
    """Yield statements from a schema file.

    Statements end with ';' at the end of a line. Full-line '--' comments and any
    CREATE DATABASE / USE lines are dropped so the target database comes from config.
    """
    current: list[str] = []
    for line in sql.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        head = stripped.upper()
        if head.startswith("CREATE DATABASE") or head.startswith("USE "):
            continue
        current.append(line)
        if stripped.endswith(";"):
            yield "\n".join(current).rstrip().rstrip(";")
            current = []
    if current:
        yield "\n".join(current).strip()


def _open(target: DBConfig, *, server_only: bool = False):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
    }
    if not server_only:
        params["database"] = target.database
    try:
        return mysql.connector.connect(**params)
    except mysql.connector.Error as exc:
        raise StoreUnavailableError(f"Database connection failed: {exc}") from exc


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every schema statement; returns the count."""
    target = DBConfig.from_dict(db_config)

    server = _open(target, server_only=True)
    try:
        server.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        server.commit()
    finally:
        server.close()

    statements = list(schema_statements(Path(schema_path).read_text(encoding="utf-8")))
    conn = _open(target)
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s schema statements to %s", len(statements), target.database)
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    conn = _open(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()


def missing_tables(db_config: dict) -> list[str]:
    present = set(list_tables(db_config))
    return [name for name in REQUIRED_TABLES if name not in present]
