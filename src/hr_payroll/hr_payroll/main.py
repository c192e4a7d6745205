from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, PayrollSettings, build_container
from .database.bootstrap import apply_schema, missing_tables
from .employees.controller import register as register_hourly_rates
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app; a prebuilt container skips all database setup."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            missing = missing_tables(db_config)
            if missing:
                logger.warning("Schema applied but tables are missing: %s", ", ".join(missing))

        container = build_container(db_config=db_config, settings=PayrollSettings.from_module(settings))

    register_error_handlers(app)
    register_attendance(app, container)
    register_payroll(app, container)
    register_hourly_rates(app, container)
    register_timesheets(app, container)
    register_reports(app, container)

    return app
