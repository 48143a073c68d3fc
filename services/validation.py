"""Query-parameter parsing for the readings endpoints."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from models.records import CREATED_AT_FIELD, SORTABLE_FIELDS, VALUE_FIELDS

ORDER_DIRECTIONS = ("asc", "desc")


class InvalidParameterError(ValueError):
    """A query parameter was present but unusable."""

    def __init__(
        self, parameter: str, message: str, allowed: Optional[Sequence[str]] = None
    ) -> None:
        super().__init__(message)
        self.parameter = parameter
        self.allowed = list(allowed) if allowed is not None else None


def missing_value_fields(payload: Mapping[str, Any]) -> list[str]:
    """Names of the value fields absent from ``payload``; ``None`` counts as present."""
    return [name for name in VALUE_FIELDS if name not in payload]


def parse_limit(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError as exc:
        raise InvalidParameterError(
            "limit", f"limit must be an integer, got {value!r}"
        ) from exc
    if parsed <= 0:
        raise InvalidParameterError("limit", f"limit must be positive, got {parsed}")
    return parsed


def parse_order_by(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return CREATED_AT_FIELD
    candidate = value.strip()
    if candidate not in SORTABLE_FIELDS:
        raise InvalidParameterError(
            "orderBy", f"Cannot order by {candidate!r}", allowed=SORTABLE_FIELDS
        )
    return candidate


def parse_descending(value: Optional[str]) -> bool:
    """Map ``order`` to a descending flag; defaults to descending."""
    if value is None or not value.strip():
        return True
    candidate = value.strip().lower()
    if candidate not in ORDER_DIRECTIONS:
        raise InvalidParameterError(
            "order", f"order must be 'asc' or 'desc', got {value!r}", allowed=ORDER_DIRECTIONS
        )
    return candidate == "desc"
