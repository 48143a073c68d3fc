import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

import pytest

from datastore.base import ReadingStoreError
from datastore.memory import InMemoryReadingStore
from models.records import ReadingQuery, StoredReading
from services.readings import ReadingService

VALUES = {"value1": 1, "value2": 2, "value3": 3, "value4": 4, "value5": 5}


class RecordingStore(InMemoryReadingStore):
    def __init__(self) -> None:
        super().__init__(account="acct")
        self.queries: list[ReadingQuery] = []
        self.deleted: list[str] = []

    async def query(self, query: ReadingQuery) -> list[StoredReading]:
        self.queries.append(query)
        return await super().query(query)

    async def delete(self, reading_id: str) -> None:
        self.deleted.append(reading_id)
        await super().delete(reading_id)


class BrokenStore:
    async def add(self, fields: Mapping[str, Any]) -> str:
        raise ReadingStoreError("quota exceeded")

    async def get(self, reading_id: str) -> Optional[StoredReading]:
        raise ReadingStoreError("quota exceeded")

    async def query(self, query: ReadingQuery) -> list[StoredReading]:
        raise ReadingStoreError("quota exceeded")

    async def delete(self, reading_id: str) -> None:
        raise ReadingStoreError("quota exceeded")

    async def close(self) -> None:
        return None


def test_save_stores_values_and_display_timestamp() -> None:
    store = RecordingStore()
    service = ReadingService(store=store, account="acct")

    result = asyncio.run(service.save(dict(VALUES, extra="ignored")))

    assert result.success is True
    assert result.error is None
    assert re.match(r"^\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2}$", result.timestamp or "")
    stored = asyncio.run(store.get(result.id or ""))
    assert stored is not None
    assert {key: stored.fields[key] for key in VALUES} == VALUES
    assert stored.fields["timestamp"] == result.timestamp
    assert "extra" not in stored.fields


def test_save_failure_is_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    service = ReadingService(store=BrokenStore(), account="acct")

    with caplog.at_level(logging.ERROR, logger="services.readings"):
        result = asyncio.run(service.save(VALUES))

    assert result.success is False
    assert result.id is None
    assert result.error == "quota exceeded"
    assert any(record.message == "Failed to save reading" for record in caplog.records)


def test_other_operations_propagate_store_errors() -> None:
    service = ReadingService(store=BrokenStore(), account="acct")

    with pytest.raises(ReadingStoreError):
        asyncio.run(service.list_readings())
    with pytest.raises(ReadingStoreError):
        asyncio.run(service.latest())


def test_get_unknown_reading_raises_key_error() -> None:
    service = ReadingService(store=RecordingStore(), account="acct")

    with pytest.raises(KeyError):
        asyncio.run(service.get("nope"))


def test_delete_missing_reading_never_issues_delete() -> None:
    store = RecordingStore()
    service = ReadingService(store=store, account="acct")

    with pytest.raises(KeyError):
        asyncio.run(service.delete("nope"))

    assert store.deleted == []


def test_latest_and_range_build_created_at_queries() -> None:
    store = RecordingStore()
    service = ReadingService(store=store, account="acct")
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    end = datetime(2024, 1, 2, tzinfo=timezone.utc)

    assert asyncio.run(service.latest()) is None
    assert asyncio.run(service.in_range(start, end)) == []

    latest_query, range_query = store.queries
    assert latest_query == ReadingQuery(order_by="createdAt", descending=True, limit=1)
    assert range_query == ReadingQuery(
        order_by="createdAt", descending=True, limit=100, created_from=start, created_to=end
    )


def test_list_defaults() -> None:
    store = RecordingStore()
    service = ReadingService(store=store, account="acct")

    asyncio.run(service.list_readings())

    assert store.queries == [ReadingQuery(order_by="createdAt", descending=True, limit=50)]
