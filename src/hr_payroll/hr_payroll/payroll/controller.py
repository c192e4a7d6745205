from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import current_actor, login_required, optional_int
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Adjustment
from .overrides.service import OverrideInput


def register(app: Flask, container: Container) -> None:
    def _required_date(value):
        if not value:
            raise ValidationError("date is required")
        try:
            return parse_iso_date(str(value))
        except ValueError:
            raise ValidationError("Invalid date format. Expected YYYY-MM-DD")

    def _required_user(value) -> int:
        user_id = optional_int(value, "userId")
        if user_id is None:
            raise ValidationError("userId is required")
        return user_id

    @app.route("/api/payroll/daily-earnings", methods=["GET"], endpoint="api_daily_earnings")
    @login_required
    def api_daily_earnings():
        actor = current_actor()
        employee_id = optional_int(request.args.get("userId"), "userId") or actor.user_id
        month = optional_int(request.args.get("month"), "month")
        year = optional_int(request.args.get("year"), "year")
        if month is None or year is None:
            raise ValidationError("Month and year are required")

        container.payroll_service.require_can_view(
            actor_role=actor.role, actor_id=actor.user_id, employee_id=employee_id
        )
        daily = container.payroll_service.daily_earnings(employee_id, month, year, now=now_local())
        return jsonify({"dailyEarnings": daily})

    @app.route("/api/payroll/summary", methods=["POST"], endpoint="api_payroll_summary")
    @login_required
    def api_payroll_summary():
        actor = current_actor()
        data = request.get_json(silent=True) or {}
        employee_id = optional_int(data.get("userId"), "userId") or actor.user_id
        container.payroll_service.require_can_view(
            actor_role=actor.role, actor_id=actor.user_id, employee_id=employee_id
        )
        summary = container.payroll_service.monthly_summary(
            employee_id,
            data.get("month"),
            data.get("year"),
            now=now_local(),
            bonuses=[Adjustment.from_dict(b) for b in data.get("bonuses") or []],
            deductions=[Adjustment.from_dict(d) for d in data.get("deductions") or []],
        )
        return jsonify(summary)

    @app.route("/api/payroll/daily-override", methods=["POST"], endpoint="api_daily_override_save")
    @login_required
    def api_daily_override_save():
        actor = current_actor()
        data = request.get_json(silent=True) or {}
        employee_id = _required_user(data.get("userId"))
        day = _required_date(data.get("date"))

        resolution = container.override_service.save(
            actor_role=actor.role,
            actor_id=actor.user_id,
            employee_id=employee_id,
            day=day,
            data=OverrideInput.from_payload(data),
            now=now_local(),
        )
        return jsonify(resolution.to_dict()), 201

    @app.route("/api/payroll/daily-override", methods=["DELETE"], endpoint="api_daily_override_delete")
    @login_required
    def api_daily_override_delete():
        actor = current_actor()
        employee_id = _required_user(request.args.get("userId"))
        day = _required_date(request.args.get("date"))
        container.override_service.remove(actor_role=actor.role, employee_id=employee_id, day=day)
        return jsonify({"success": True})
