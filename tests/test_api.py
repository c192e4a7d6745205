from __future__ import annotations

from datetime import date

import pytest

from src.hr_payroll.hr_payroll.core.enums import Role
from src.hr_payroll.hr_payroll.core.exceptions import StoreUnavailableError
from src.hr_payroll.hr_payroll.main import create_app
from tests.fakes import make_employee

CRON_HEADERS = {"Authorization": "Bearer test-cron-secret"}


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff(employees, attendance):
    employees.add(make_employee(1, hourly_rate=20))
    employees.add(make_employee(2, role=Role.MANAGER))
    attendance.add_day(1, date(2025, 1, 6), "08:00", "18:00")
    attendance.add_day(1, date(2025, 1, 7))


def login(client, user_id, role=Role.EMPLOYEE, company_id=1):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value
        sess["company_id"] = company_id


def test_requires_login(client):
    resp = client.get("/api/reports")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")

    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_daily_earnings_for_self(client, staff):
    login(client, 1)

    resp = client.get("/api/payroll/daily-earnings?month=1&year=2025")

    assert resp.status_code == 200
    daily = resp.get_json()["dailyEarnings"]
    assert daily["6"]["earnings"] == 220
    assert daily["7"]["earnings"] == 160


def test_daily_earnings_validation_and_permissions(client, staff):
    login(client, 1)

    assert client.get("/api/payroll/daily-earnings?month=1").status_code == 400
    assert client.get("/api/payroll/daily-earnings?month=13&year=2025").status_code == 400
    assert client.get("/api/payroll/daily-earnings?userId=2&month=1&year=2025").status_code == 403


def test_manager_overrides_then_reverts_a_day(client, staff):
    login(client, 2, Role.MANAGER)

    resp = client.post(
        "/api/payroll/daily-override",
        json={"userId": 1, "date": "2025-01-07", "hourlyRate": 25, "regularHours": 6, "overtimeHours": 0},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["isOverride"] is True
    assert body["effective"]["earnings"] == 150
    assert body["original"]["earnings"] == 160

    daily = client.get("/api/payroll/daily-earnings?userId=1&month=1&year=2025").get_json()["dailyEarnings"]
    assert daily["7"]["isOverride"] is True

    resp = client.delete("/api/payroll/daily-override?userId=1&date=2025-01-07")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}
    assert client.delete("/api/payroll/daily-override?userId=1&date=2025-01-07").status_code == 404


def test_override_rejected_for_employees_and_bad_input(client, staff):
    login(client, 1)
    resp = client.post("/api/payroll/daily-override", json={"userId": 1, "date": "2025-01-07", "earnings": 10})
    assert resp.status_code == 403

    login(client, 2, Role.MANAGER)
    assert client.post("/api/payroll/daily-override", json={"date": "2025-01-07"}).status_code == 400
    assert client.post("/api/payroll/daily-override", json={"userId": 1, "date": "07/01/2025"}).status_code == 400
    resp = client.post("/api/payroll/daily-override", json={"userId": 1, "date": "2025-01-07", "totalHours": -1})
    assert resp.status_code == 400


def test_payroll_summary(client, staff):
    login(client, 2, Role.MANAGER)

    resp = client.post(
        "/api/payroll/summary",
        json={"userId": 1, "month": 1, "year": 2025, "bonuses": [{"name": "Referral", "amount": 50}]},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["baseSalary"] == 380
    assert body["netSalary"] == 430


def test_hourly_rate_periods_change_daily_earnings(client, staff):
    login(client, 2, Role.MANAGER)
    period = {"userId": 1, "startDate": "2025-01-07", "endDate": "2025-01-31", "hourlyRate": 30}

    created = client.post("/api/payroll/hourly-rates", json=period)
    assert created.status_code == 201
    period_id = created.get_json()["hourlyRatePeriod"]["id"]

    overlap = client.post("/api/payroll/hourly-rates", json={**period, "startDate": "2025-01-20", "endDate": "2025-02-10"})
    assert overlap.status_code == 400
    assert "overlaps" in overlap.get_json()["error"]

    login(client, 1)
    listed = client.get("/api/payroll/hourly-rates").get_json()["hourlyRatePeriods"]
    assert [p["id"] for p in listed] == [period_id]
    assert client.post("/api/payroll/hourly-rates", json=period).status_code == 403

    daily = client.get("/api/payroll/daily-earnings?month=1&year=2025").get_json()["dailyEarnings"]
    assert daily["6"]["earnings"] == 220
    assert daily["7"]["earnings"] == 240

    login(client, 2, Role.MANAGER)
    assert client.delete(f"/api/payroll/hourly-rates/{period_id}").status_code == 200
    assert client.delete(f"/api/payroll/hourly-rates/{period_id}").status_code == 404

    login(client, 1)
    daily = client.get("/api/payroll/daily-earnings?month=1&year=2025").get_json()["dailyEarnings"]
    assert daily["7"]["earnings"] == 160


def test_generate_timesheets_for_self(client, staff, timesheets):
    login(client, 1)

    resp = client.post("/api/timesheets/generate", json={"month": 1, "year": 2025})

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["result"]["created"] == 2
    assert body["message"].startswith("Generated 2 new timesheets")
    assert len(timesheets.all()) == 2


def test_generate_timesheets_for_range_and_permissions(client, staff):
    login(client, 1)
    assert client.post("/api/timesheets/generate", json={"userId": 2, "month": 1, "year": 2025}).status_code == 403
    assert client.post("/api/timesheets/generate", json={}).status_code == 400

    login(client, 2, Role.MANAGER)
    resp = client.post(
        "/api/timesheets/generate",
        json={"userId": 1, "startDate": "2025-01-06", "endDate": "2025-01-06"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["result"]["created"] == 1


def test_cron_requires_bearer_secret(client, staff):
    assert client.get("/api/cron/generate-timesheets").status_code == 401
    bad = {"Authorization": "Bearer wrong"}
    assert client.get("/api/cron/generate-timesheets", headers=bad).status_code == 401


def test_cron_generates_for_requested_month(client, staff):
    resp = client.get("/api/cron/generate-timesheets?month=1&year=2025&companyId=1", headers=CRON_HEADERS)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert (body["month"], body["year"], body["companyId"]) == (1, 2025, 1)
    assert body["totalProcessed"] == 2
    assert body["totalCreated"] == 2


def test_report_for_manager_and_bad_period(client, staff):
    login(client, 2, Role.MANAGER)

    resp = client.get("/api/reports?startDate=2025-01-06&endDate=2025-01-10")
    assert resp.status_code == 200
    summary = resp.get_json()["summary"]
    assert summary["totalEmployees"] == 2
    assert summary["totalHours"] == 18

    assert client.get("/api/reports?period=fortnight").status_code == 400
    assert client.get("/api/reports?startDate=2025-01-10&endDate=2025-01-06").status_code == 400


def test_store_outage_maps_to_503(client, staff, container, monkeypatch):
    def unavailable(**kwargs):
        raise StoreUnavailableError("Database connection failed")

    monkeypatch.setattr(container.report_service, "build", unavailable)
    login(client, 2, Role.MANAGER)

    resp = client.get("/api/reports")

    assert resp.status_code == 503
    assert resp.get_json() == {"error": "Service temporarily unavailable"}


def test_check_in_and_out(client, staff):
    login(client, 1)

    resp = client.post("/api/attendance/checkin", json={"notes": "on site"})
    assert resp.status_code == 201
    assert resp.get_json()["attendance"]["checkOutTime"] is None

    assert client.post("/api/attendance/checkin").status_code == 400

    resp = client.post("/api/attendance/checkout")
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["checkOutTime"] is not None
