"""Create the payroll database and tables for the configured APP_ENV.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.hr_payroll.hr_payroll.database.bootstrap import apply_schema, missing_tables

logger = logging.getLogger("init_db")


def main() -> int:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings_module = get_settings_module()
    db_config = dict(importlib.import_module(settings_module).DB_CONFIG)

    count = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    missing = missing_tables(db_config)
    if missing:
        logger.error("Tables still missing after %s statements: %s", count, ", ".join(missing))
        return 1

    logger.info(
        "Schema ready for %s (%s@%s/%s)",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("database"),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
