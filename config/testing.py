import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

OVERTIME_THRESHOLD_HOURS = 8.0
OVERTIME_MULTIPLIER = 1.5
STANDARD_HOURS_PER_DAY = 8.0

REPORT_MAX_WORKERS = 1

CRON_SECRET = "test-cron-secret"

WORKDAY_START = "09:00"
