from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.core.enums import PaymentType
from src.hr_payroll.hr_payroll.employees.rates import RateResolver
from tests.fakes import InMemoryHourlyRates, make_employee

# March 2025 has 21 weekdays
MARCH = date(2025, 3, 14)


def test_hourly_employee_gets_hourly_rate():
    assert RateResolver().resolve(make_employee(1, hourly_rate=18.5), MARCH) == 18.5


def test_salary_is_returned_unmodified_by_default():
    employee = make_employee(1, hourly_rate=None, monthly_salary=3360, payment_type=PaymentType.SALARY)
    assert RateResolver().resolve(employee, MARCH) == 3360


def test_salary_hourly_equivalent_spreads_over_working_hours():
    employee = make_employee(1, hourly_rate=None, monthly_salary=3360, payment_type=PaymentType.SALARY)

    assert RateResolver().resolve(employee, MARCH, hourly_equivalent=True) == pytest.approx(20.0)
    assert RateResolver(standard_hours_per_day=7).resolve(
        employee, MARCH, hourly_equivalent=True
    ) == pytest.approx(3360 / (21 * 7))


@pytest.mark.parametrize("rate", [None, 0, -5])
def test_missing_or_non_positive_rate_is_none(rate):
    assert RateResolver().resolve(make_employee(1, hourly_rate=rate), MARCH) is None



def test_dated_period_beats_the_employee_rate():
    periods = InMemoryHourlyRates()
    periods.add(1, date(2025, 3, 10), date(2025, 3, 20), 24)
    resolver = RateResolver(periods)
    employee = make_employee(1, hourly_rate=18.5)

    assert resolver.resolve(employee, MARCH) == 24
    assert resolver.resolve(employee, date(2025, 3, 21)) == 18.5
    assert resolver.resolve(make_employee(2, hourly_rate=None), MARCH) is None


def test_preloaded_periods_skip_the_lookup():
    periods = InMemoryHourlyRates()
    periods.add(1, date(2025, 3, 1), date(2025, 3, 31), 24)
    resolver = RateResolver(periods)

    loaded = resolver.periods_for(1, date(2025, 3, 1), date(2025, 3, 31))
    assert periods.lookups == 1
    assert resolver.resolve(make_employee(1), MARCH, periods=loaded) == 24
    assert resolver.resolve(make_employee(1), MARCH, periods=()) == 20
    assert periods.lookups == 1


def test_salary_ignores_hourly_periods():
    periods = InMemoryHourlyRates()
    periods.add(1, date(2025, 3, 1), date(2025, 3, 31), 99)
    employee = make_employee(1, hourly_rate=None, monthly_salary=3360, payment_type=PaymentType.SALARY)

    assert RateResolver(periods).resolve(employee, MARCH) == 3360
