from __future__ import annotations

import pytest

from src.hr_payroll.hr_payroll.container import PayrollSettings, wire
from tests.fakes import (
    InMemoryAttendance,
    InMemoryEmployees,
    InMemoryHourlyRates,
    InMemoryOverrides,
    InMemoryOvertimeConfigs,
    InMemoryTaskLogs,
    InMemoryTimesheets,
)


@pytest.fixture
def employees():
    return InMemoryEmployees()


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def overrides():
    return InMemoryOverrides()


@pytest.fixture
def timesheets():
    return InMemoryTimesheets()


@pytest.fixture
def task_logs():
    return InMemoryTaskLogs()


@pytest.fixture
def overtime_configs():
    return InMemoryOvertimeConfigs()


@pytest.fixture
def hourly_rates():
    return InMemoryHourlyRates()


@pytest.fixture
def container(employees, attendance, overrides, timesheets, task_logs, overtime_configs, hourly_rates):
    return wire(
        employees_repo=employees,
        attendance_repo=attendance,
        overrides_repo=overrides,
        timesheets_repo=timesheets,
        task_logs_repo=task_logs,
        overtime_configs_repo=overtime_configs,
        hourly_rates_repo=hourly_rates,
        settings=PayrollSettings(max_workers=2, cron_secret="test-cron-secret"),
    )
