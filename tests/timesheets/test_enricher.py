from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from src.hr_payroll.hr_payroll.core.enums import PaymentType
from src.hr_payroll.hr_payroll.core.exceptions import InvalidRangeError, NotFoundError
from src.hr_payroll.hr_payroll.payroll.overrides.model import OverrideFields
from src.hr_payroll.hr_payroll.payroll.overtime_config import OvertimeConfig
from src.hr_payroll.hr_payroll.tasks.model import TaskLog
from tests.fakes import make_employee

NOW = datetime(2025, 2, 10, 12, 0)


def test_every_day_gets_an_entry_even_without_attendance(container, employees):
    employees.add(make_employee(1))

    entries = container.enricher.enrich(1, date(2025, 1, 1), date(2025, 1, 3), now=NOW)

    assert [e.work_date for e in entries] == [date(2025, 1, 1), date(2025, 1, 2), date(2025, 1, 3)]
    assert all(e.hours == 0 and e.earnings == 0 for e in entries)
    assert not any(e.has_work for e in entries)


def test_ten_hour_day_splits_into_regular_and_overtime(container, employees, attendance):
    employees.add(make_employee(1, hourly_rate=20))
    attendance.add_day(1, date(2025, 1, 6), "08:00", "18:00")

    [entry] = container.enricher.enrich(1, date(2025, 1, 6), date(2025, 1, 6), now=NOW)

    assert entry.hours == pytest.approx(10)
    assert entry.regular_hours == pytest.approx(8)
    assert entry.overtime_hours == pytest.approx(2)
    assert entry.earnings == pytest.approx(220)
    assert entry.is_override is False
    assert entry.original is None


def test_punch_segments_are_summed_and_breaks_reported(container, employees, attendance):
    employees.add(make_employee(1))
    attendance.add_day(
        1,
        date(2025, 1, 7),
        punches=(("in", "09:00"), ("out", "12:00"), ("in", "13:00"), ("out", "18:00")),
    )

    [entry] = container.enricher.enrich(1, date(2025, 1, 7), date(2025, 1, 7), now=NOW)

    assert entry.hours == pytest.approx(8)
    assert entry.break_hours == pytest.approx(1)
    assert entry.to_dict()["breakHours"] == 1.0


def test_enrichment_is_repeatable(container, employees, attendance):
    employees.add(make_employee(1))
    attendance.add_day(1, date(2025, 1, 6))
    attendance.add_day(1, date(2025, 1, 8), "09:00", "19:30")

    first = container.enricher.enrich(1, date(2025, 1, 1), date(2025, 1, 31), now=NOW)
    second = container.enricher.enrich(1, date(2025, 1, 1), date(2025, 1, 31), now=NOW)

    assert first == second
    assert len(first) == 31


def test_override_replaces_effective_values_and_keeps_original(container, employees, attendance, overrides):
    employees.add(make_employee(1, hourly_rate=20))
    attendance.add_day(1, date(2025, 1, 6))
    overrides.upsert(1, date(2025, 1, 6), OverrideFields(hourly_rate=25, regular_hours=6, overtime_hours=0, total_hours=6))

    [entry] = container.enricher.enrich(1, date(2025, 1, 6), date(2025, 1, 6), now=NOW)

    assert entry.is_override is True
    assert entry.earnings == pytest.approx(150)
    assert entry.original.earnings == pytest.approx(160)
    assert entry.to_daily_dict()["originalData"]["hours"] == 8


def test_override_on_a_day_without_attendance_counts_as_work(container, employees, overrides):
    employees.add(make_employee(1, hourly_rate=20))
    overrides.upsert(1, date(2025, 1, 11), OverrideFields(total_hours=5))

    [entry] = container.enricher.enrich(1, date(2025, 1, 11), date(2025, 1, 11), now=NOW)

    assert entry.has_work is True
    assert entry.hours == pytest.approx(5)
    assert entry.earnings == pytest.approx(100)


def test_task_logs_are_attached_to_their_day(container, employees, attendance, task_logs):
    employees.add(make_employee(1))
    attendance.add_day(1, date(2025, 1, 6))
    task_logs.logs.append(TaskLog(1, 1, date(2025, 1, 6), 5, "Quarterly audit", 3.0))
    task_logs.logs.append(TaskLog(2, 2, date(2025, 1, 6), 5, "Someone else", 1.0))

    entries = container.enricher.enrich(1, date(2025, 1, 6), date(2025, 1, 7), now=NOW)

    assert [t.task_title for t in entries[0].task_logs] == ["Quarterly audit"]
    assert entries[1].task_logs == ()


def test_open_segment_today_is_provisional(container, employees, attendance):
    employees.add(make_employee(1))
    attendance.add_day(1, NOW.date(), "09:00", None)
    attendance.add_day(1, date(2025, 2, 7), "09:00", None)

    entries = container.enricher.enrich(1, date(2025, 2, 7), NOW.date(), now=NOW)
    by_day = {e.work_date: e for e in entries}

    today = by_day[NOW.date()]
    assert today.provisional is True
    assert today.hours == pytest.approx(3)

    # Older open days wait for auto check-out and contribute nothing.
    stale = by_day[date(2025, 2, 7)]
    assert stale.provisional is False
    assert stale.hours == 0


def test_override_clears_provisional_only_when_it_fixes_both_hour_parts(container, employees, attendance, overrides):
    employees.add(make_employee(1, hourly_rate=20))
    attendance.add_day(1, NOW.date(), "09:00", None)

    overrides.upsert(1, NOW.date(), OverrideFields(hourly_rate=25, regular_hours=6))
    [partial] = container.enricher.enrich(1, NOW.date(), NOW.date(), now=NOW)
    assert partial.is_override is True
    assert partial.provisional is True

    overrides.upsert(1, NOW.date(), OverrideFields(regular_hours=6, overtime_hours=0))
    [pinned] = container.enricher.enrich(1, NOW.date(), NOW.date(), now=NOW)
    assert pinned.provisional is False
    assert pinned.hours == pytest.approx(6)


def test_rate_changes_mid_month_follow_the_dated_periods(container, employees, attendance, hourly_rates):
    employees.add(make_employee(1, hourly_rate=20))
    hourly_rates.add(1, date(2025, 1, 1), date(2025, 1, 6), 25)
    hourly_rates.add(1, date(2025, 1, 7), date(2025, 1, 31), 30)
    for day in (6, 7):
        attendance.add_day(1, date(2025, 1, day))
    lookups_before = hourly_rates.lookups

    entries = container.enricher.enrich(1, date(2025, 1, 1), date(2025, 1, 31), now=NOW)
    by_day = {e.work_date.day: e for e in entries}

    assert (by_day[6].hourly_rate, by_day[6].earnings) == (25, 200)
    assert (by_day[7].hourly_rate, by_day[7].earnings) == (30, 240)
    # Loaded once for the whole range
    assert hourly_rates.lookups == lookups_before + 1


def test_salary_employee_uses_hourly_equivalent(container, employees, attendance):
    employees.add(make_employee(1, hourly_rate=None, monthly_salary=3360, payment_type=PaymentType.SALARY))
    attendance.add_day(1, date(2025, 3, 3))

    [entry] = container.enricher.enrich(1, date(2025, 3, 3), date(2025, 3, 3), now=NOW)

    assert entry.hourly_rate == pytest.approx(20)
    assert entry.earnings == pytest.approx(160)


def test_employee_overtime_config_beats_default(container, employees, attendance, overtime_configs):
    employees.add(make_employee(1, hourly_rate=20))
    attendance.add_day(1, date(2025, 1, 6))
    overtime_configs.configs.append(OvertimeConfig(1, None, 1, 6.0, 2.0, date(2025, 1, 1)))

    [entry] = container.enricher.enrich(1, date(2025, 1, 6), date(2025, 1, 6), now=NOW)

    assert entry.regular_hours == pytest.approx(6)
    assert entry.overtime_hours == pytest.approx(2)
    assert entry.earnings == pytest.approx(6 * 20 + 2 * 40)


def test_missing_rate_reports_zero_earnings_and_warns(container, employees, attendance, caplog):
    employees.add(make_employee(1, hourly_rate=None))
    attendance.add_day(1, date(2025, 1, 6))

    with caplog.at_level(logging.WARNING):
        [entry] = container.enricher.enrich(1, date(2025, 1, 6), date(2025, 1, 6), now=NOW)

    assert entry.hours == pytest.approx(8)
    assert entry.earnings == 0
    assert entry.rate_missing is True
    assert "no rate configured" in caplog.text


def test_bad_range_and_unknown_employee(container, employees):
    employees.add(make_employee(1))

    with pytest.raises(InvalidRangeError):
        container.enricher.enrich(1, date(2025, 1, 31), date(2025, 1, 1), now=NOW)
    with pytest.raises(NotFoundError):
        container.enricher.enrich(99, date(2025, 1, 1), date(2025, 1, 31), now=NOW)


def test_enrich_many_isolates_failures(container, employees, attendance):
    first = employees.add(make_employee(1))
    second = employees.add(make_employee(2))
    attendance.add_day(1, date(2025, 1, 6))
    attendance.fail_for[2] = RuntimeError("attendance store timed out")

    outcomes = container.enricher.enrich_many([first, second], date(2025, 1, 6), date(2025, 1, 6), now=NOW)

    assert [o.key for o in outcomes] == [1, 2]
    assert outcomes[0].ok and outcomes[0].value[0].hours == pytest.approx(8)
    assert not outcomes[1].ok
    assert "timed out" in str(outcomes[1].error)
