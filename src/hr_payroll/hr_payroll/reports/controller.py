from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import current_actor, login_required
from ..container import Container
from ..core.exceptions import ValidationError


def _optional_date(value, field_name: str):
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports", methods=["GET"], endpoint="api_reports")
    @login_required
    def api_reports():
        actor = current_actor()
        report = container.report_service.build(
            role=actor.role,
            company_id=actor.company_id,
            user_id=actor.user_id,
            now=now_local(),
            period=request.args.get("period"),
            start=_optional_date(request.args.get("startDate"), "startDate"),
            end=_optional_date(request.args.get("endDate"), "endDate"),
        )
        return jsonify(report.to_dict())
