"""Reading persistence and retrieval on top of a ``ReadingStore``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from datastore.base import ReadingStore, ReadingStoreError
from models.records import (
    CREATED_AT_FIELD,
    TIMESTAMP_FIELD,
    VALUE_FIELDS,
    ReadingQuery,
    StoredReading,
)
from services.timestamps import display_timestamp

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50
DEFAULT_RANGE_LIMIT = 100


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a save; failures carry the backend message instead of raising."""

    success: bool
    id: Optional[str] = None
    timestamp: Optional[str] = None
    error: Optional[str] = None


class ReadingService:
    """Single-account reading operations, one store round trip each."""

    def __init__(self, store: ReadingStore, account: str) -> None:
        self.store = store
        self.account = account

    async def save(self, values: Mapping[str, Any]) -> SaveResult:
        timestamp = display_timestamp()
        fields = {name: values[name] for name in VALUE_FIELDS}
        fields[TIMESTAMP_FIELD] = timestamp
        try:
            reading_id = await self.store.add(fields)
        except ReadingStoreError as exc:
            logger.error(
                "Failed to save reading",
                extra={"account": self.account, "reason": str(exc)},
            )
            return SaveResult(success=False, error=str(exc))

        logger.info("Reading saved", extra={"account": self.account, "reading_id": reading_id})
        return SaveResult(success=True, id=reading_id, timestamp=timestamp)

    async def list_readings(
        self,
        limit: int = DEFAULT_LIST_LIMIT,
        order_by: str = CREATED_AT_FIELD,
        descending: bool = True,
    ) -> list[StoredReading]:
        readings = await self.store.query(
            ReadingQuery(order_by=order_by, descending=descending, limit=limit)
        )
        logger.debug(
            "Listed readings",
            extra={
                "order_by": order_by,
                "direction": "desc" if descending else "asc",
                "limit": limit,
                "count": len(readings),
            },
        )
        return readings

    async def get(self, reading_id: str) -> StoredReading:
        reading = await self.store.get(reading_id)
        if reading is None:
            raise KeyError(f"Reading {reading_id!r} not found.")
        return reading

    async def latest(self) -> Optional[StoredReading]:
        readings = await self.store.query(ReadingQuery(limit=1))
        return readings[0] if readings else None

    async def in_range(
        self, start: datetime, end: datetime, limit: int = DEFAULT_RANGE_LIMIT
    ) -> list[StoredReading]:
        """Readings with ``start <= createdAt <= end``, newest first."""
        readings = await self.store.query(
            ReadingQuery(limit=limit, created_from=start, created_to=end)
        )
        logger.debug(
            "Range query",
            extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "limit": limit,
                "count": len(readings),
            },
        )
        return readings

    async def delete(self, reading_id: str) -> None:
        # A missing document short-circuits before any delete is issued.
        await self.get(reading_id)
        await self.store.delete(reading_id)
        logger.info("Reading deleted", extra={"account": self.account, "reading_id": reading_id})
