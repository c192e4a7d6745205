from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class TaskLog:
    task_log_id: int
    employee_id: int
    work_date: date
    task_id: Optional[int]
    task_title: str
    hours: float
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.task_log_id,
            "taskId": self.task_id,
            "title": self.task_title,
            "hours": round(self.hours, 2),
            "description": self.description,
        }
