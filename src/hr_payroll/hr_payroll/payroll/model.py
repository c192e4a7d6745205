from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DayValues:
    """Hours, rate and earnings for one employee-day.

    Invariant: hours == regular_hours + overtime_hours (within float rounding).
    When `hourly_rate` is None the earnings are 0 and `rate_missing` is set.
    """

    hours: float
    regular_hours: float
    overtime_hours: float
    hourly_rate: Optional[float]
    earnings: float
    rate_missing: bool = False

    def to_dict(self) -> dict:
        return {
            "hours": round(self.hours, 2),
            "regularHours": round(self.regular_hours, 2),
            "overtimeHours": round(self.overtime_hours, 2),
            "hourlyRate": round(self.hourly_rate, 2) if self.hourly_rate is not None else None,
            "earnings": round(self.earnings, 2),
        }


@dataclass(frozen=True)
class Adjustment:
    """A named bonus or deduction line."""

    name: str
    amount: float

    @classmethod
    def from_dict(cls, data: dict) -> "Adjustment":
        return cls(name=str(data.get("name") or ""), amount=float(data.get("amount") or 0))
