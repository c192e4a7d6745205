from __future__ import annotations

from typing import Optional

from .base import HoursSplit, PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hours up to the threshold are regular, the rest is overtime."""

    def split(
        self,
        total_hours: float,
        *,
        threshold_hours: float,
        multiplier: float,
        rate: Optional[float] = None,
    ) -> HoursSplit:
        total_hours = max(float(total_hours), 0.0)
        regular = min(total_hours, float(threshold_hours))
        overtime = max(0.0, total_hours - float(threshold_hours))
        return HoursSplit(
            regular_hours=regular,
            overtime_hours=overtime,
            pay=self.pay(regular, overtime, rate, multiplier),
            rate_missing=rate is None,
        )
