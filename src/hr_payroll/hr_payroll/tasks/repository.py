from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import TaskLog


class TaskLogRepository(Protocol):
    def find_by_employee_and_date_range(self, employee_id: int, start: date, end: date) -> Sequence[TaskLog]:
        raise NotImplementedError
