from __future__ import annotations

from datetime import date
from typing import Any

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_coordinate(value: Any, field_name: str, *, limit: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number") from None
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} out of range")
    return number


def require_date_range(start: str, end: str) -> tuple[date, date]:
    try:
        start_date = parse_iso_date(start)
        end_date = parse_iso_date(end)
    except (TypeError, ValueError):
        raise ValidationError("Dates must be YYYY-MM-DD") from None
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")
    return start_date, end_date
