import uuid
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from fastapi import HTTPException

CENTS = Decimal("0.01")


def coerce_uuid(value, field: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {field}") from exc


def apply_ordering(query, order_by: str, order_dir: str, allowed_columns: dict):
    if order_by not in allowed_columns:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid order_by. Allowed: {', '.join(sorted(allowed_columns))}",
        )
    column = allowed_columns[order_by]
    if order_dir == "desc":
        return query.order_by(column.desc())
    return query.order_by(column.asc())


def apply_pagination(query, limit: int, offset: int):
    return query.limit(limit).offset(offset)


def validate_enum(value, enum_cls: type[Enum], label: str):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {label}") from exc


def round_money(value) -> Decimal:
    return Decimal(value or 0).quantize(CENTS, rounding=ROUND_HALF_UP)


def require_min_length(value: str, label: str, minimum: int = 2) -> str:
    term = (value or "").strip()
    if len(term) < minimum:
        raise HTTPException(
            status_code=400,
            detail=f"{label} must be at least {minimum} characters",
        )
    return term
