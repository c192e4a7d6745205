from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ...common.validators import require_non_negative
from ...core.constants import MAX_HOURS_PER_DAY
from ...core.enums import Role
from ...core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..reconcile import HoursBreakdown, HoursField, HoursReconciler
from .model import OverrideFields, OverrideResolution
from .resolver import DailyOverrideResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverrideInput:
    """Fields an actor submitted for one day; None means "leave as is"."""

    hourly_rate: Optional[float] = None
    regular_hours: Optional[float] = None
    overtime_hours: Optional[float] = None
    total_hours: Optional[float] = None
    earnings: Optional[float] = None
    notes: Optional[str] = None
    last_edited: Optional[HoursField] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "OverrideInput":
        last = payload.get("lastEdited")
        try:
            last_edited = HoursField(last) if last else None
        except ValueError:
            raise ValidationError("lastEdited must be one of totalHours, regularHours, overtimeHours")
        return cls(
            hourly_rate=require_non_negative(payload.get("hourlyRate"), "hourlyRate"),
            regular_hours=require_non_negative(payload.get("regularHours"), "regularHours"),
            overtime_hours=require_non_negative(payload.get("overtimeHours"), "overtimeHours"),
            total_hours=require_non_negative(payload.get("totalHours"), "totalHours"),
            earnings=require_non_negative(payload.get("earnings"), "earnings"),
            notes=(payload.get("notes") or "").strip() or None,
            last_edited=last_edited,
        )

    def hour_edits(self) -> dict[HoursField, float]:
        edits = {
            HoursField.REGULAR: self.regular_hours,
            HoursField.OVERTIME: self.overtime_hours,
            HoursField.TOTAL: self.total_hours,
        }
        return {k: v for k, v in edits.items() if v is not None}


class OverrideService:
    """Create, update and delete per-day payroll overrides."""

    def __init__(self, resolver: DailyOverrideResolver, *, reconciler: Optional[HoursReconciler] = None):
        self._resolver = resolver
        self._overrides = resolver.overrides
        self._reconciler = reconciler or HoursReconciler()

    @staticmethod
    def _require_manager(actor_role: Role) -> None:
        if actor_role == Role.EMPLOYEE:
            raise AuthorizationError("Only admins and managers can edit daily payroll data")

    def save(
        self,
        *,
        actor_role: Role,
        actor_id: Optional[int],
        employee_id: int,
        day: date,
        data: OverrideInput,
        now: datetime,
    ) -> OverrideResolution:
        self._require_manager(actor_role)
        if day > now.date():
            raise ValidationError("Cannot create override for future dates")

        # Closed segments only: an open segment is still in progress and must not
        # end up in stored hours. A save replaces the whole override.
        closed = self._resolver.resolve(employee_id, day)
        hours: Optional[HoursBreakdown] = None
        edits = data.hour_edits()
        if edits:
            base = HoursBreakdown.from_parts(closed.original.regular_hours, closed.original.overtime_hours)
            hours = self._reconciler.apply_edits(base, edits, last_edited=data.last_edited)
            if hours.total_hours > MAX_HOURS_PER_DAY:
                raise ValidationError("Total hours cannot exceed 24 hours per day")

        fields = OverrideFields(
            hourly_rate=data.hourly_rate,
            regular_hours=hours.regular_hours if hours else None,
            overtime_hours=hours.overtime_hours if hours else None,
            total_hours=hours.total_hours if hours else None,
            earnings=data.earnings,
            notes=data.notes,
            created_by=actor_id,
        )
        self._overrides.upsert(employee_id, day, fields)
        logger.info("Saved payroll override for employee %s on %s", employee_id, day.isoformat())
        return self._resolver.resolve(employee_id, day, now=now)

    def remove(self, *, actor_role: Role, employee_id: int, day: date) -> None:
        self._require_manager(actor_role)
        if self._overrides.get(employee_id, day) is None:
            raise NotFoundError("Override not found")
        self._overrides.delete(employee_id, day)
        logger.info("Deleted payroll override for employee %s on %s", employee_id, day.isoformat())
