from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_enum(enum_cls: Type[E], value: object, field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().lower())
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_enum(enum_cls: Type[E], value: object, field_name: str) -> Optional[E]:
    """Treat blank and 'all' as no filter."""
    v = str(value or "").strip().lower()
    if not v or v == "all":
        return None
    return require_enum(enum_cls, v, field_name)


def require_date(value: str, field_name: str) -> date:
    try:
        return parse_iso_date((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def optional_int(value: object, field_name: str) -> Optional[int]:
    v = str(value if value is not None else "").strip()
    if not v or v == "all":
        return None
    try:
        return int(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number")


def as_flag(value: object) -> bool:
    """Checkbox or JSON boolean: only 1/true/on/yes count as set."""

    return str(value if value is not None else "").strip().lower() in ("1", "true", "on", "yes")
