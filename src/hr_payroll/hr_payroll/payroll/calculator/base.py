from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class HoursSplit:
    regular_hours: float
    overtime_hours: float
    pay: float
    rate_missing: bool = False

    @property
    def total_hours(self) -> float:
        return self.regular_hours + self.overtime_hours


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def split(
        self,
        total_hours: float,
        *,
        threshold_hours: float,
        multiplier: float,
        rate: Optional[float] = None,
    ) -> HoursSplit:
        raise NotImplementedError

    def pay(self, regular_hours: float, overtime_hours: float, rate: Optional[float], multiplier: float) -> float:
        """regular * rate + overtime * rate * multiplier; 0 when the rate is unknown."""
        if rate is None:
            return 0.0
        return regular_hours * rate + overtime_hours * rate * multiplier
