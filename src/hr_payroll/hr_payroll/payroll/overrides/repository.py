from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import DailyPayrollOverride, OverrideFields


class OverrideRepository(Protocol):
    """Per-(employee, day) manual corrections.

    `upsert` must write the whole row atomically (last write wins); `delete` must
    not touch attendance data.
    """

    def get(self, employee_id: int, work_date: date) -> Optional[DailyPayrollOverride]:
        raise NotImplementedError

    def upsert(self, employee_id: int, work_date: date, fields: OverrideFields) -> None:
        raise NotImplementedError

    def delete(self, employee_id: int, work_date: date) -> bool:
        raise NotImplementedError
