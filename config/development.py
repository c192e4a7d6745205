import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Payroll defaults used when no overtime_configs row applies
OVERTIME_THRESHOLD_HOURS = float(os.getenv("OVERTIME_THRESHOLD_HOURS", "8"))
OVERTIME_MULTIPLIER = float(os.getenv("OVERTIME_MULTIPLIER", "1.5"))
STANDARD_HOURS_PER_DAY = float(os.getenv("STANDARD_HOURS_PER_DAY", "8"))

REPORT_MAX_WORKERS = int(os.getenv("REPORT_MAX_WORKERS", "4"))

CRON_SECRET = os.getenv("CRON_SECRET", "dev-cron-secret")

# Check-ins after WORKDAY_START plus a 5 minute grace are marked LATE; empty disables
WORKDAY_START = os.getenv("WORKDAY_START", "09:00")
