"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, StoreUnavailableError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: Role
    company_id: Optional[int]


def current_actor() -> Actor:
    company_id = session.get("company_id")
    return Actor(
        user_id=int(session["user_id"]),
        role=Role(session.get("role", Role.EMPLOYEE.value)),
        company_id=int(company_id) if company_id is not None else None,
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        return view(*args, **kwargs)

    return wrapper


def optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _forbidden(e):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(StoreUnavailableError)
    def _store_unavailable(e):
        logger.error("Record store unavailable: %s", e)
        return jsonify({"error": "Service temporarily unavailable"}), 503

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500
