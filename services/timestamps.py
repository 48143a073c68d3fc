"""Clock helpers: display timestamps and inclusive date-range bounds."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

DISPLAY_OFFSET = timedelta(hours=5, minutes=30)
DISPLAY_FORMAT = "%Y:%m:%d %H:%M:%S"
END_OF_DAY = time(23, 59, 59, 999000)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def display_timestamp(now: Optional[datetime] = None) -> str:
    """Format ``now`` as wall-clock time at UTC+05:30, e.g. ``2024:01:31 17:05:09``."""
    instant = now if now is not None else _utcnow()
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    shifted = instant.astimezone(timezone.utc) + DISPLAY_OFFSET
    return shifted.strftime(DISPLAY_FORMAT)


def iso_timestamp(now: Optional[datetime] = None) -> str:
    """UTC instant in ISO 8601 with millisecond precision and a ``Z`` suffix."""
    instant = (now if now is not None else _utcnow()).astimezone(timezone.utc)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_iso(value: str) -> datetime:
    """Parse an ISO date or datetime, keeping any offset it was written with."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Date is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError(f"Invalid date {value!r}") from exc
    return parsed


def parse_instant(value: str) -> datetime:
    """Parse an ISO date or datetime; dates become midnight UTC."""
    parsed = _parse_iso(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def range_bounds(start_date: str, end_date: str) -> tuple[datetime, datetime]:
    """Return ``(start, end)`` where ``end`` covers the whole of its calendar day."""
    start = parse_instant(start_date)
    # The calendar day as written, before any shift to UTC.
    end_day: date = _parse_iso(end_date).date()
    end = datetime.combine(end_day, END_OF_DAY, tzinfo=timezone.utc)
    return start, end
