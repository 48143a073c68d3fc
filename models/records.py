"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

VALUE_FIELDS = ("value1", "value2", "value3", "value4", "value5")
TIMESTAMP_FIELD = "timestamp"
CREATED_AT_FIELD = "createdAt"
SORTABLE_FIELDS = (CREATED_AT_FIELD, TIMESTAMP_FIELD) + VALUE_FIELDS


@dataclass(slots=True)
class StoredReading:
    """A reading document as returned by the datastore."""

    id: str
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def created_at(self) -> Optional[datetime]:
        value = self.fields.get(CREATED_AT_FIELD)
        return value if isinstance(value, datetime) else None

    def to_payload(self) -> Dict[str, Any]:
        """Flatten into the API representation with the id first."""
        payload: Dict[str, Any] = {"id": self.id}
        for key, value in self.fields.items():
            if isinstance(value, datetime):
                value = value.isoformat()
            payload[key] = value
        return payload


@dataclass(frozen=True)
class ReadingQuery:
    """Ordered, limited and optionally date-bounded query over readings."""

    order_by: str = CREATED_AT_FIELD
    descending: bool = True
    limit: int = 50
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
