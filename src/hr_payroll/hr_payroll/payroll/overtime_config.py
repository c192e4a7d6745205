from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_OVERTIME_MULTIPLIER, DEFAULT_OVERTIME_THRESHOLD_HOURS
from ..employees.model import Employee


@dataclass(frozen=True)
class OvertimePolicy:
    threshold_hours: float = DEFAULT_OVERTIME_THRESHOLD_HOURS
    multiplier: float = DEFAULT_OVERTIME_MULTIPLIER


@dataclass(frozen=True)
class OvertimeConfig:
    """Stored overtime rule, scoped to one employee or to a whole organization."""

    config_id: int
    organization_id: Optional[int]
    employee_id: Optional[int]
    threshold_hours: float
    multiplier: float
    effective_from: date

    def to_policy(self) -> OvertimePolicy:
        return OvertimePolicy(threshold_hours=self.threshold_hours, multiplier=self.multiplier)


class OvertimeConfigRepository(Protocol):
    def list_for(self, *, employee_id: int, organization_id: Optional[int]) -> Sequence[OvertimeConfig]:
        """Rows scoped to the employee or to the organization, any effective date."""

        raise NotImplementedError


class OvertimePolicyProvider:
    """Pick the overtime rule effective for an employee on a day.

    Employee rows beat organization rows; within a scope the latest
    `effective_from` not after the day wins. Falls back to the defaults.
    """

    def __init__(self, configs: OvertimeConfigRepository, *, default: Optional[OvertimePolicy] = None):
        self._configs = configs
        self._default = default or OvertimePolicy()

    @property
    def default(self) -> OvertimePolicy:
        return self._default

    def policy_for(self, employee: Employee, day: date) -> OvertimePolicy:
        return self.pick(self.configs_for(employee), employee, day)

    def configs_for(self, employee: Employee) -> Sequence[OvertimeConfig]:
        return self._configs.list_for(employee_id=employee.employee_id, organization_id=employee.organization_id)

    def pick(self, configs: Sequence[OvertimeConfig], employee: Employee, day: date) -> OvertimePolicy:
        """Same as policy_for over preloaded rows (avoids one query per day)."""
        effective = [c for c in configs if c.effective_from <= day]

        personal = [c for c in effective if c.employee_id == employee.employee_id]
        if personal:
            return max(personal, key=lambda c: c.effective_from).to_policy()

        company = [
            c
            for c in effective
            if c.employee_id is None
            and c.organization_id is not None
            and c.organization_id == employee.organization_id
        ]
        if company:
            return max(company, key=lambda c: c.effective_from).to_policy()
        return self._default
