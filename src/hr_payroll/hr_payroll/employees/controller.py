from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_actor, login_required, optional_int
from ..container import Container
from ..core.exceptions import ValidationError


def _date(value, field_name: str, *, required: bool = False):
    if not value:
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Expected YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    service = container.hourly_rate_service

    @app.route("/api/payroll/hourly-rates", methods=["GET"], endpoint="api_hourly_rates_list")
    @login_required
    def api_hourly_rates_list():
        actor = current_actor()
        periods = service.list_periods(
            role=actor.role,
            company_id=actor.company_id,
            user_id=actor.user_id,
            employee_id=optional_int(request.args.get("userId"), "userId"),
            start=_date(request.args.get("startDate"), "startDate"),
            end=_date(request.args.get("endDate"), "endDate"),
        )
        return jsonify({"hourlyRatePeriods": [p.to_dict() for p in periods]})

    @app.route("/api/payroll/hourly-rates", methods=["POST"], endpoint="api_hourly_rates_create")
    @login_required
    def api_hourly_rates_create():
        actor = current_actor()
        data = request.get_json(silent=True) or {}
        employee_id: Optional[int] = optional_int(data.get("userId"), "userId")
        if employee_id is None:
            raise ValidationError("userId is required")
        if data.get("hourlyRate") is None:
            raise ValidationError("hourlyRate is required")

        period = service.create(
            role=actor.role,
            company_id=actor.company_id,
            user_id=actor.user_id,
            employee_id=employee_id,
            start=_date(data.get("startDate"), "startDate", required=True),
            end=_date(data.get("endDate"), "endDate", required=True),
            hourly_rate=data.get("hourlyRate"),
        )
        return jsonify({"hourlyRatePeriod": period.to_dict()}), 201

    @app.route("/api/payroll/hourly-rates/<int:period_id>", methods=["PATCH"], endpoint="api_hourly_rates_update")
    @login_required
    def api_hourly_rates_update(period_id: int):
        actor = current_actor()
        data = request.get_json(silent=True) or {}
        period = service.update(
            role=actor.role,
            company_id=actor.company_id,
            period_id=period_id,
            start=_date(data.get("startDate"), "startDate"),
            end=_date(data.get("endDate"), "endDate"),
            hourly_rate=data.get("hourlyRate"),
        )
        return jsonify({"hourlyRatePeriod": period.to_dict()})

    @app.route("/api/payroll/hourly-rates/<int:period_id>", methods=["DELETE"], endpoint="api_hourly_rates_delete")
    @login_required
    def api_hourly_rates_delete(period_id: int):
        actor = current_actor()
        service.delete(role=actor.role, company_id=actor.company_id, period_id=period_id)
        return jsonify({"message": "Hourly rate period deleted successfully"})
