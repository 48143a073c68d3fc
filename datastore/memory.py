from __future__ import annotations
import json
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Mapping, Optional
from uuid import uuid4

from datastore.base import ReadingStoreError
from models.records import CREATED_AT_FIELD, ReadingQuery, StoredReading

_TYPE_RANKS = (
    (type(None), 0),
    (bool, 1),
    (int, 2),
    (float, 2),
    (datetime, 3),
    (str, 4),
)


def _sort_key(value: Any) -> tuple[int, Any]:
    # Mixed types are ranked the way Firestore orders them.
    for kind, rank in _TYPE_RANKS:
        if isinstance(value, kind):
            return rank, (0 if value is None else value)
    return 5, json.dumps(value, sort_keys=True, default=str)


class InMemoryReadingStore:

    def __init__(self, account: str, persistence_path: Optional[Path] = None) -> None:
        self.account = account
        self._items: Dict[str, Dict[str, Any]] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    async def add(self, fields: Mapping[str, Any]) -> str:
        reading_id = uuid4().hex
        document = deepcopy(dict(fields))
        document[CREATED_AT_FIELD] = datetime.now(timezone.utc)
        with self._lock:
            items = dict(self._items)
            items[reading_id] = document
            self._commit(items)
        return reading_id

    async def get(self, reading_id: str) -> Optional[StoredReading]:
        with self._lock:
            document = self._items.get(reading_id)
            if document is None:
                return None
            return StoredReading(id=reading_id, fields=deepcopy(document))

    async def query(self, query: ReadingQuery) -> list[StoredReading]:
        """Return deep copies of matching readings, ordered and limited."""

        with self._lock:
            snapshot = [
                (reading_id, deepcopy(document))
                for reading_id, document in self._items.items()
                if query.order_by in document
            ]

        matches = [
            StoredReading(id=reading_id, fields=document)
            for reading_id, document in snapshot
            if self._within_range(document, query)
        ]
        matches.sort(
            key=lambda reading: _sort_key(reading.fields[query.order_by]),
            reverse=query.descending,
        )
        return matches[: query.limit]

    async def delete(self, reading_id: str) -> None:
        with self._lock:
            items = dict(self._items)
            items.pop(reading_id, None)
            self._commit(items)

    async def close(self) -> None:
        return None

    def put_document(self, reading_id: str, document: Mapping[str, Any]) -> None:
        """Seed a reading with an explicit id and ``createdAt``."""
        with self._lock:
            items = dict(self._items)
            items[reading_id] = deepcopy(dict(document))
            self._commit(items)

    @staticmethod
    def _within_range(document: Mapping[str, Any], query: ReadingQuery) -> bool:
        if query.created_from is None and query.created_to is None:
            return True
        created_at = document.get(CREATED_AT_FIELD)
        if not isinstance(created_at, datetime):
            return False
        if query.created_from is not None and created_at < query.created_from:
            return False
        if query.created_to is not None and created_at > query.created_to:
            return False
        return True

    def _commit(self, items: Dict[str, Dict[str, Any]]) -> None:
        """Write ``items`` to disk, then make them the live state."""
        try:
            self._persist(items)
        except (OSError, TypeError, ValueError) as exc:
            raise ReadingStoreError(f"Could not persist readings: {exc}") from exc
        self._items = items

    def _persist(self, items: Mapping[str, Dict[str, Any]]) -> None:
        if not self.persistence_path:
            return
        payload = {}
        for reading_id, document in items.items():
            serialized = dict(document)
            created_at = serialized.get(CREATED_AT_FIELD)
            if isinstance(created_at, datetime):
                serialized[CREATED_AT_FIELD] = created_at.isoformat()
            payload[reading_id] = serialized
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = {}

        for reading_id, document in data.items():
            created_at = document.get(CREATED_AT_FIELD)
            if isinstance(created_at, str):
                document[CREATED_AT_FIELD] = datetime.fromisoformat(created_at)
            self._items[reading_id] = document
