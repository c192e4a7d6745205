from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import MAX_YEAR, MIN_YEAR
from ..core.exceptions import InvalidRangeError, ValidationError


def require_valid_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidRangeError("End date must not be before start date")


def require_month_year(month: int, year: int) -> tuple[int, int]:
    try:
        month, year = int(month), int(year)
    except (TypeError, ValueError):
        raise InvalidRangeError("Month and year must be integers")
    if not 1 <= month <= 12:
        raise InvalidRangeError("Invalid month. Must be between 1 and 12.")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise InvalidRangeError(f"Invalid year. Must be between {MIN_YEAR} and {MAX_YEAR}.")
    return month, year


def require_non_negative(value: Optional[float], field_name: str) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if number < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return number
