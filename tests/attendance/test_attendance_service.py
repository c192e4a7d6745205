from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.hr_payroll.hr_payroll.attendance.service import AttendanceService
from src.hr_payroll.hr_payroll.core.enums import AttendanceStatus, PunchType
from src.hr_payroll.hr_payroll.core.exceptions import NotFoundError, ValidationError
from tests.fakes import make_employee

DAY = date(2025, 1, 6)


@pytest.fixture
def service(attendance, employees):
    employees.add(make_employee(1))
    return AttendanceService(attendance, employees, workday_start=time(9, 0), grace_minutes=5)


def test_check_in_creates_record_with_status(service):
    on_time = service.check_in(1, now=datetime(2025, 1, 6, 9, 4))

    assert on_time.status == AttendanceStatus.PRESENT
    assert on_time.is_open
    assert [p.kind for p in on_time.punches] == [PunchType.IN]


def test_check_in_after_grace_is_late(service):
    record = service.check_in(1, now=datetime(2025, 1, 6, 9, 6))
    assert record.status == AttendanceStatus.LATE


def test_second_check_in_while_open_is_rejected(service):
    service.check_in(1, now=datetime(2025, 1, 6, 9, 0))
    with pytest.raises(ValidationError):
        service.check_in(1, now=datetime(2025, 1, 6, 10, 0))


def test_re_check_in_opens_new_segment(service):
    service.check_in(1, now=datetime(2025, 1, 6, 9, 0), notes="first")
    service.check_out(1, now=datetime(2025, 1, 6, 12, 0))

    record = service.check_in(1, now=datetime(2025, 1, 6, 13, 0))

    assert record.check_in_time == datetime(2025, 1, 6, 13, 0)
    assert record.check_out_time is None
    assert record.first_check_in == datetime(2025, 1, 6, 9, 0)
    assert [p.kind for p in record.punches] == [PunchType.IN, PunchType.OUT, PunchType.IN]
    assert record.user_notes == "first"


def test_check_out_without_check_in_is_rejected(service):
    with pytest.raises(ValidationError):
        service.check_out(1, now=datetime(2025, 1, 6, 17, 0))


def test_unknown_employee_cannot_check_in(service):
    with pytest.raises(NotFoundError):
        service.check_in(99, now=datetime(2025, 1, 6, 9, 0))


def test_previous_open_day_is_closed_at_end_of_day(service, attendance):
    attendance.add_day(1, DAY, "09:00", None)

    service.check_in(1, now=datetime(2025, 1, 7, 9, 0))

    closed = attendance.find_by_employee_and_date(1, DAY)
    assert closed.check_out_time == datetime(2025, 1, 6, 23, 59, 59)
    assert closed.auto_checked_out is True
    assert closed.punches[-1].kind == PunchType.OUT
