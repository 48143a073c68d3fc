"""Storage contract shared by every reading backend."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from models.records import ReadingQuery, StoredReading


class ReadingStoreError(RuntimeError):
    """Raised when the underlying document database rejects or fails a call."""


class ReadingStore(Protocol):
    """Create/get/query/delete over the readings of a single account."""

    async def add(self, fields: Mapping[str, Any]) -> str:
        """Persist a new reading and return its generated id.

        The store stamps ``createdAt`` itself; callers never supply it.
        """
        ...

    async def get(self, reading_id: str) -> Optional[StoredReading]:
        ...

    async def query(self, query: ReadingQuery) -> list[StoredReading]:
        ...

    async def delete(self, reading_id: str) -> None:
        ...

    async def close(self) -> None:
        ...
