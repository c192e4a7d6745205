from __future__ import annotations

import hmac
import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date, previous_month
from ..common.web import current_actor, login_required, optional_int
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _cron_authorized() -> bool:
        secret = container.settings.cron_secret
        header = request.headers.get("Authorization", "")
        return bool(secret) and hmac.compare_digest(header, f"Bearer {secret}")

    @app.route("/api/timesheets/generate", methods=["POST"], endpoint="api_generate_timesheets")
    @login_required
    def api_generate_timesheets():
        actor = current_actor()
        data = request.get_json(silent=True) or {}
        employee_id = optional_int(data.get("userId"), "userId") or actor.user_id
        if employee_id != actor.user_id and actor.role == Role.EMPLOYEE:
            raise AuthorizationError("You do not have permission to generate timesheets for this user")

        now = now_local()
        if data.get("month") and data.get("year"):
            result = container.timesheet_generator.generate_month_for_employee(
                employee_id, data["month"], data["year"], now=now
            )
        elif data.get("startDate") and data.get("endDate"):
            try:
                start = parse_iso_date(str(data["startDate"]))
                end = parse_iso_date(str(data["endDate"]))
            except ValueError:
                raise ValidationError("startDate and endDate must be dates in YYYY-MM-DD format")
            result = container.timesheet_generator.generate_for_employee(employee_id, start, end, now=now)
        else:
            raise ValidationError("Either provide startDate and endDate, or month and year")

        return jsonify(
            {
                "success": True,
                "result": result.to_dict(),
                "message": (
                    f"Generated {result.created} new timesheets, updated {result.updated} existing "
                    f"timesheets, skipped {result.skipped} timesheets"
                ),
            }
        )

    @app.route("/api/cron/generate-timesheets", methods=["GET"], endpoint="api_cron_generate_timesheets")
    def api_cron_generate_timesheets():
        if not _cron_authorized():
            logger.warning("Rejected scheduled timesheet generation: bad or missing bearer token")
            return jsonify({"error": "Unauthorized"}), 401

        now = now_local()
        month = optional_int(request.args.get("month"), "month")
        year = optional_int(request.args.get("year"), "year")
        if month is None or year is None:
            month, year = previous_month(now.date())
        company_id = optional_int(request.args.get("companyId"), "companyId")

        report = container.timesheet_generator.generate(month, year, company_id, now=now)
        body = report.to_dict()
        body.update({"success": True, "month": month, "year": year, "companyId": company_id or "all"})
        return jsonify(body)
