from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_MAX_WORKERS,
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_OVERTIME_THRESHOLD_HOURS,
    STANDARD_HOURS_PER_DAY,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.hourly_rate_service import HourlyRateService
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.mysql_hourly_rate_repository import MySQLHourlyRatePeriodRepository
from .employees.rates import RateResolver
from .employees.repository import EmployeeRepository, HourlyRatePeriodRepository
from .payroll.mysql_overtime_config_repository import MySQLOvertimeConfigRepository
from .payroll.overrides.mysql_override_repository import MySQLOverrideRepository
from .payroll.overrides.repository import OverrideRepository
from .payroll.overrides.resolver import DailyOverrideResolver
from .payroll.overrides.service import OverrideService
from .payroll.overtime_config import OvertimeConfigRepository, OvertimePolicy, OvertimePolicyProvider
from .payroll.service import PayrollService
from .reports.service import PeriodReportAggregator, ReportService
from .tasks.mysql_task_log_repository import MySQLTaskLogRepository
from .tasks.repository import TaskLogRepository
from .timesheets.enricher import TimesheetEnricher
from .timesheets.generator import MonthlyTimesheetGenerator
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository


def _parse_clock(value) -> Optional[time]:
    if not value:
        return None
    return datetime.strptime(str(value), "%H:%M").time()


@dataclass(frozen=True)
class PayrollSettings:
    overtime_threshold_hours: float = DEFAULT_OVERTIME_THRESHOLD_HOURS
    overtime_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER
    standard_hours_per_day: float = STANDARD_HOURS_PER_DAY
    max_workers: int = DEFAULT_MAX_WORKERS
    cron_secret: str = ""
    workday_start: Optional[time] = None

    @classmethod
    def from_module(cls, settings) -> "PayrollSettings":
        return cls(
            overtime_threshold_hours=float(getattr(settings, "OVERTIME_THRESHOLD_HOURS", DEFAULT_OVERTIME_THRESHOLD_HOURS)),
            overtime_multiplier=float(getattr(settings, "OVERTIME_MULTIPLIER", DEFAULT_OVERTIME_MULTIPLIER)),
            standard_hours_per_day=float(getattr(settings, "STANDARD_HOURS_PER_DAY", STANDARD_HOURS_PER_DAY)),
            max_workers=int(getattr(settings, "REPORT_MAX_WORKERS", DEFAULT_MAX_WORKERS)),
            cron_secret=str(getattr(settings, "CRON_SECRET", "") or ""),
            workday_start=_parse_clock(getattr(settings, "WORKDAY_START", None)),
        )


@dataclass(frozen=True)
class Container:
    settings: PayrollSettings

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    overrides_repo: OverrideRepository
    timesheets_repo: TimesheetRepository
    task_logs_repo: TaskLogRepository
    overtime_configs_repo: OvertimeConfigRepository
    hourly_rates_repo: HourlyRatePeriodRepository

    attendance_service: AttendanceService
    hourly_rate_service: HourlyRateService
    override_resolver: DailyOverrideResolver
    override_service: OverrideService
    enricher: TimesheetEnricher
    timesheet_generator: MonthlyTimesheetGenerator
    payroll_service: PayrollService
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    overrides_repo: OverrideRepository,
    timesheets_repo: TimesheetRepository,
    task_logs_repo: TaskLogRepository,
    overtime_configs_repo: OvertimeConfigRepository,
    hourly_rates_repo: HourlyRatePeriodRepository,
    settings: Optional[PayrollSettings] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    settings = settings or PayrollSettings()

    rates = RateResolver(hourly_rates_repo, standard_hours_per_day=settings.standard_hours_per_day)
    overtime = OvertimePolicyProvider(
        overtime_configs_repo,
        default=OvertimePolicy(
            threshold_hours=settings.overtime_threshold_hours,
            multiplier=settings.overtime_multiplier,
        ),
    )

    attendance_service = AttendanceService(
        attendance_repo, employees_repo, workday_start=settings.workday_start, grace_minutes=5
    )
    hourly_rate_service = HourlyRateService(employees_repo, hourly_rates_repo)
    override_resolver = DailyOverrideResolver(overrides_repo, attendance_repo, employees_repo, rates, overtime)
    override_service = OverrideService(override_resolver)
    enricher = TimesheetEnricher(
        employees_repo,
        attendance_repo,
        override_resolver,
        overtime,
        task_logs_repo,
        max_workers=settings.max_workers,
    )
    timesheet_generator = MonthlyTimesheetGenerator(
        employees_repo, timesheets_repo, enricher, max_workers=settings.max_workers
    )
    payroll_service = PayrollService(employees_repo, enricher)
    aggregator = PeriodReportAggregator(
        employees_repo, attendance_repo, timesheets_repo, enricher, max_workers=settings.max_workers
    )
    report_service = ReportService(employees_repo, aggregator)

    return Container(
        settings=settings,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        overrides_repo=overrides_repo,
        timesheets_repo=timesheets_repo,
        task_logs_repo=task_logs_repo,
        overtime_configs_repo=overtime_configs_repo,
        hourly_rates_repo=hourly_rates_repo,
        attendance_service=attendance_service,
        hourly_rate_service=hourly_rate_service,
        override_resolver=override_resolver,
        override_service=override_service,
        enricher=enricher,
        timesheet_generator=timesheet_generator,
        payroll_service=payroll_service,
        report_service=report_service,
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Optional[PayrollSettings] = None) -> Container:
    settings = settings or PayrollSettings()
    # Room for every fan-out worker plus request threads.
    conn = DatabaseConnection(DBConfig.from_dict(db_config), pool_size=settings.max_workers * 2 + 1)

    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        overrides_repo=MySQLOverrideRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        task_logs_repo=MySQLTaskLogRepository(conn),
        overtime_configs_repo=MySQLOvertimeConfigRepository(conn),
        hourly_rates_repo=MySQLHourlyRatePeriodRepository(conn),
        settings=settings,
        conn=conn,
    )
