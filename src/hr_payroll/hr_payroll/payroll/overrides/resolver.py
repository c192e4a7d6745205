from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ...attendance.hours import HoursCalculator, WorkedTime
from ...attendance.model import AttendanceRecord
from ...attendance.repository import AttendanceRepository
from ...core.exceptions import NotFoundError, ValidationError
from ...employees.model import Employee, HourlyRatePeriod
from ...employees.rates import RateResolver
from ...employees.repository import EmployeeRepository
from ..calculator.base import PayrollCalculator
from ..calculator.standard_calculator import StandardPayrollCalculator
from ..model import DayValues
from ..overtime_config import OvertimePolicy, OvertimePolicyProvider
from ..reconcile import HoursBreakdown, HoursField, HoursReconciler
from .model import DailyPayrollOverride, OverrideResolution
from .repository import OverrideRepository


class DailyOverrideResolver:
    """Merge a stored manual override over the attendance-derived values of a day.

    The original values are always recomputed from attendance, so deleting the
    override is enough to revert.
    """

    def __init__(
        self,
        overrides: OverrideRepository,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        rates: RateResolver,
        overtime: OvertimePolicyProvider,
        *,
        hours: Optional[HoursCalculator] = None,
        calculator: Optional[PayrollCalculator] = None,
        reconciler: Optional[HoursReconciler] = None,
    ):
        self._overrides = overrides
        self._attendance = attendance
        self._employees = employees
        self._rates = rates
        self._overtime = overtime
        self._hours = hours or HoursCalculator()
        self._calculator = calculator or StandardPayrollCalculator()
        self._reconciler = reconciler or HoursReconciler()

    @property
    def overrides(self) -> OverrideRepository:
        return self._overrides

    @property
    def rates(self) -> RateResolver:
        return self._rates

    def resolve(self, employee_id: int, day: date, *, now: Optional[datetime] = None) -> OverrideResolution:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")

        record = self._attendance.find_by_employee_and_date(employee_id, day)
        policy = self._overtime.policy_for(employee, day)
        original, _ = self.compute(employee, day, record, policy, now=now)
        return self.merge(original, self._overrides.get(employee_id, day), policy)

    def compute(
        self,
        employee: Employee,
        day: date,
        record: Optional[AttendanceRecord],
        policy: OvertimePolicy,
        *,
        now: Optional[datetime] = None,
        rate_periods: Optional[Sequence[HourlyRatePeriod]] = None,
    ) -> tuple[DayValues, WorkedTime]:
        """Attendance-derived values, ignoring any override.

        `rate_periods` are preloaded hourly rate periods; when omitted the rate
        resolver looks up the day itself.
        """
        # Only today's open segment counts as in progress; older open days wait
        # for auto check-out.
        reference = now if now is not None and now.date() == day else None
        worked = self._hours.for_record(record, now=reference)
        rate = self._rates.resolve(employee, day, hourly_equivalent=True, periods=rate_periods)
        split = self._calculator.split(
            worked.worked_hours,
            threshold_hours=policy.threshold_hours,
            multiplier=policy.multiplier,
            rate=rate,
        )
        values = DayValues(
            hours=worked.worked_hours,
            regular_hours=split.regular_hours,
            overtime_hours=split.overtime_hours,
            hourly_rate=rate,
            earnings=split.pay,
            rate_missing=split.rate_missing,
        )
        return values, worked

    def merge(
        self,
        original: DayValues,
        override: Optional[DailyPayrollOverride],
        policy: OvertimePolicy,
    ) -> OverrideResolution:
        if override is None:
            return OverrideResolution(effective=original, original=original, is_override=False)

        fields = override.fields
        breakdown = self._override_hours(original, override, policy)
        rate = fields.hourly_rate if fields.hourly_rate is not None else original.hourly_rate

        if fields.earnings is not None:
            earnings = fields.earnings
            rate_missing = False
        else:
            earnings = self._calculator.pay(breakdown.regular_hours, breakdown.overtime_hours, rate, policy.multiplier)
            rate_missing = rate is None

        effective = DayValues(
            hours=breakdown.total_hours,
            regular_hours=breakdown.regular_hours,
            overtime_hours=breakdown.overtime_hours,
            hourly_rate=rate,
            earnings=earnings,
            rate_missing=rate_missing,
        )
        return OverrideResolution(effective=effective, original=original, is_override=True, override=override)

    def _override_hours(
        self, original: DayValues, override: DailyPayrollOverride, policy: OvertimePolicy
    ) -> HoursBreakdown:
        fields = override.fields
        base = HoursBreakdown.from_parts(original.regular_hours, original.overtime_hours)
        edits = {
            HoursField.REGULAR: fields.regular_hours,
            HoursField.OVERTIME: fields.overtime_hours,
            HoursField.TOTAL: fields.total_hours,
        }
        edits = {k: v for k, v in edits.items() if v is not None}
        try:
            return self._reconciler.apply_edits(base, edits)
        except ValidationError:
            # Total-only row smaller than the computed overtime: split it afresh.
            split = self._calculator.split(
                fields.total_hours or 0.0,
                threshold_hours=policy.threshold_hours,
                multiplier=policy.multiplier,
            )
            return HoursBreakdown.from_parts(split.regular_hours, split.overtime_hours)
