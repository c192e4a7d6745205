from __future__ import annotations

import logging
from datetime import date, datetime

from src.hr_payroll.hr_payroll.attendance.hours import HoursCalculator
from src.hr_payroll.hr_payroll.attendance.model import PunchEvent
from src.hr_payroll.hr_payroll.core.enums import PunchType
from tests.fakes import at

DAY = date(2025, 1, 6)


def _p(kind: str, hhmm: str) -> PunchEvent:
    return PunchEvent(PunchType(kind), at(DAY, hhmm))


def test_hours_between_is_elapsed_hours():
    calc = HoursCalculator()
    assert calc.hours_between(at(DAY, "09:00"), at(DAY, "19:00")) == 10.0
    assert calc.hours_between(at(DAY, "09:00"), at(DAY, "09:45")) == 0.75


def test_hours_between_out_of_order_is_never_negative(caplog):
    calc = HoursCalculator()
    with caplog.at_level(logging.WARNING):
        hours = calc.hours_between(at(DAY, "17:00"), at(DAY, "09:00"))

    assert hours == 8.0
    assert "Negative time difference" in caplog.text


def test_segments_are_sorted_before_summing():
    punches = [_p("in", "13:00"), _p("out", "12:00"), _p("out", "17:00"), _p("in", "09:00")]

    worked = HoursCalculator().worked_time(punches)

    assert worked.worked_hours == 7.0
    assert worked.break_hours == 1.0
    assert worked.provisional is False


def test_open_segment_counts_only_with_reference_now():
    punches = [_p("in", "09:00"), _p("out", "12:00"), _p("in", "13:00")]
    calc = HoursCalculator()

    closed_only = calc.worked_time(punches)
    in_progress = calc.worked_time(punches, now=at(DAY, "15:30"))

    assert closed_only.worked_hours == 3.0
    assert closed_only.provisional is False
    assert in_progress.worked_hours == 5.5
    assert in_progress.closed_hours == 3.0
    assert in_progress.provisional is True


def test_duplicate_check_in_keeps_first_and_stray_check_out_is_ignored():
    punches = [_p("out", "08:00"), _p("in", "09:00"), _p("in", "10:00"), _p("out", "17:00")]

    worked = HoursCalculator().worked_time(punches)

    assert worked.worked_hours == 8.0
    assert worked.break_hours == 0.0


def test_repeated_check_out_extends_last_segment():
    punches = [_p("in", "09:00"), _p("out", "17:00"), _p("out", "18:00")]

    assert HoursCalculator().worked_time(punches).worked_hours == 9.0


def test_for_record_without_record_is_zero(attendance):
    calc = HoursCalculator()
    assert calc.for_record(None).worked_hours == 0.0

    record = attendance.add_day(1, DAY, "09:00", "19:00")
    assert calc.for_record(record).worked_hours == 10.0


def test_for_record_uses_punch_history_over_check_times(attendance):
    # check_in_time moved to the re-check-in; history still has both segments
    record = attendance.add_day(
        1,
        DAY,
        "13:00",
        "17:00",
        punches=(("in", "09:00"), ("out", "12:00"), ("in", "13:00"), ("out", "17:00")),
    )

    worked = HoursCalculator().for_record(record, now=datetime(2025, 1, 6, 18, 0))

    assert worked.worked_hours == 7.0
    assert worked.provisional is False
