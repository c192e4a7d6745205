from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_actor, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="api_checkin")
    @login_required
    def api_checkin():
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.check_in(
            current_actor().user_id, now=now_local(), notes=data.get("notes")
        )
        return jsonify({"attendance": record.snapshot(), "date": record.work_date.isoformat()}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_checkout")
    @login_required
    def api_checkout():
        data = request.get_json(silent=True) or {}
        record = container.attendance_service.check_out(
            current_actor().user_id, now=now_local(), notes=data.get("notes")
        )
        return jsonify({"attendance": record.snapshot(), "date": record.work_date.isoformat()})
