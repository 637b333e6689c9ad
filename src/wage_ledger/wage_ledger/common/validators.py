from __future__ import annotations

from ..core.constants import MAX_AMOUNT, MAX_MONTH, MAX_YEAR, MIN_MONTH, MIN_YEAR
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_int(value, field_name: str) -> int:
    # bool is an int subclass; reject it so True is never read as 1 cent.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer")
    return value


def require_non_negative(value, field_name: str) -> int:
    value = require_int(value, field_name)
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    if value > MAX_AMOUNT:
        raise ValidationError(f"{field_name} must be at most {MAX_AMOUNT}")
    return value


def require_positive(value, field_name: str) -> int:
    value = require_int(value, field_name)
    if value <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    if value > MAX_AMOUNT:
        raise ValidationError(f"{field_name} must be at most {MAX_AMOUNT}")
    return value


def require_month(value) -> int:
    value = require_int(value, "Month")
    if not MIN_MONTH <= value <= MAX_MONTH:
        raise ValidationError(f"Month must be between {MIN_MONTH} and {MAX_MONTH}")
    return value


def require_year(value) -> int:
    value = require_int(value, "Year")
    if not MIN_YEAR <= value <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return value
