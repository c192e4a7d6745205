"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_OVERTIME_THRESHOLD_HOURS = 8.0
DEFAULT_OVERTIME_MULTIPLIER = 1.5
STANDARD_HOURS_PER_DAY = 8.0
MAX_HOURS_PER_DAY = 24.0

MIN_YEAR = 2000
MAX_YEAR = 2100

DEFAULT_MAX_WORKERS = 4
