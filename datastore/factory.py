from __future__ import annotations

import logging
from pathlib import Path

from datastore.base import ReadingStore
from datastore.memory import InMemoryReadingStore
from settings import BACKEND_MEMORY, Settings

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> ReadingStore:
    """Create the reading store selected by ``settings.backend``."""
    if settings.backend == BACKEND_MEMORY:
        path = Path(settings.memory_store_path) if settings.memory_store_path else None
        store: ReadingStore = InMemoryReadingStore(account=settings.account, persistence_path=path)
    else:
        # The memory backend never touches firebase_admin.
        from datastore.firestore import FirestoreReadingStore

        store = FirestoreReadingStore.from_settings(settings)

    logger.info(
        "Reading store ready",
        extra={"backend": settings.backend, "account": settings.account},
    )
    return store
