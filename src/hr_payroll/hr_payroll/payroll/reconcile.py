"""Keep total / regular / overtime hours consistent across manual edits.

Each update names the one field the user edited last; the other fields are
re-derived from it. Editing the total holds overtime fixed and moves regular
hours, editing either part recomputes the total.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..core.exceptions import ValidationError


class HoursField(str, Enum):
    TOTAL = "totalHours"
    REGULAR = "regularHours"
    OVERTIME = "overtimeHours"


@dataclass(frozen=True)
class HoursBreakdown:
    total_hours: float
    regular_hours: float
    overtime_hours: float

    @classmethod
    def from_parts(cls, regular_hours: float, overtime_hours: float) -> "HoursBreakdown":
        return cls(
            total_hours=regular_hours + overtime_hours,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
        )


class HoursReconciler:
    def apply(self, current: HoursBreakdown, field: HoursField, value: float) -> HoursBreakdown:
        value = float(value)
        if field == HoursField.REGULAR:
            return HoursBreakdown.from_parts(value, current.overtime_hours)
        if field == HoursField.OVERTIME:
            return HoursBreakdown.from_parts(current.regular_hours, value)

        if value < current.overtime_hours:
            raise ValidationError("Total hours cannot be less than overtime hours")
        return HoursBreakdown(
            total_hours=value,
            regular_hours=value - current.overtime_hours,
            overtime_hours=current.overtime_hours,
        )

    def apply_edits(
        self,
        current: HoursBreakdown,
        edits: dict[HoursField, float],
        *,
        last_edited: Optional[HoursField] = None,
    ) -> HoursBreakdown:
        """Apply several edits; `last_edited` is applied last so it wins.

        Without an explicit last field the parts win over the total: a total that
        arrives together with regular/overtime is treated as derived.
        """
        for field in _edit_order(edits, last_edited):
            current = self.apply(current, field, edits[field])
        return current


def _edit_order(edits: dict[HoursField, float], last_edited: Optional[HoursField]) -> Iterable[HoursField]:
    if last_edited is not None and last_edited in edits:
        return [f for f in edits if f != last_edited] + [last_edited]

    parts = [f for f in (HoursField.REGULAR, HoursField.OVERTIME) if f in edits]
    if parts:
        return parts
    return [HoursField.TOTAL] if HoursField.TOTAL in edits else []
