"""Firestore-backed reading store.

Readings live at ``<collection>/<account>/readings/<id>``. ``createdAt`` is a
server timestamp so ordering and range filters follow the database clock.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import BaseQuery, FieldFilter

from datastore.base import ReadingStoreError
from models.records import CREATED_AT_FIELD, ReadingQuery, StoredReading
from settings import Settings

logger = logging.getLogger(__name__)

READINGS_SUBCOLLECTION = "readings"
_APP_NAME = "readings-api"
_TOKEN_URI = "https://oauth2.googleapis.com/token"
_BACKEND_ERRORS = (GoogleAPIError, GoogleAuthError, ValueError)


def _service_account_info(settings: Settings) -> dict[str, str]:
    missing = [
        name
        for name, value in (
            ("PROJECT_ID", settings.project_id),
            ("CLIENT_EMAIL", settings.client_email),
            ("RSA", settings.private_key),
        )
        if not value
    ]
    if missing:
        raise ValueError(
            f"Firestore backend requires environment variables: {', '.join(missing)}"
        )
    return {
        "type": "service_account",
        "project_id": settings.project_id or "",
        "client_email": settings.client_email or "",
        "private_key": settings.private_key or "",
        "token_uri": _TOKEN_URI,
    }


def initialize_firebase_app(settings: Settings) -> firebase_admin.App:
    """Return the named Firebase app, creating it on first use."""
    try:
        return firebase_admin.get_app(_APP_NAME)
    except ValueError:
        certificate = credentials.Certificate(_service_account_info(settings))
        return firebase_admin.initialize_app(
            certificate, {"projectId": settings.project_id}, name=_APP_NAME
        )


class FirestoreReadingStore:

    def __init__(self, client: Any, collection: str, account: str) -> None:
        self.account = account
        self._client = client
        self._readings = (
            client.collection(collection).document(account).collection(READINGS_SUBCOLLECTION)
        )
        self._app: Optional[firebase_admin.App] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "FirestoreReadingStore":
        app = initialize_firebase_app(settings)
        store = cls(
            client=firestore_async.client(app),
            collection=settings.collection,
            account=settings.account,
        )
        store._app = app
        return store

    async def add(self, fields: Mapping[str, Any]) -> str:
        document = dict(fields)
        document[CREATED_AT_FIELD] = SERVER_TIMESTAMP
        try:
            _, reference = await self._readings.add(document)
        except _BACKEND_ERRORS as exc:
            raise ReadingStoreError(str(exc)) from exc
        return reference.id

    async def get(self, reading_id: str) -> Optional[StoredReading]:
        try:
            snapshot = await self._readings.document(reading_id).get()
        except _BACKEND_ERRORS as exc:
            raise ReadingStoreError(str(exc)) from exc
        if not snapshot.exists:
            return None
        return StoredReading(id=snapshot.id, fields=snapshot.to_dict() or {})

    async def query(self, query: ReadingQuery) -> list[StoredReading]:
        direction = BaseQuery.DESCENDING if query.descending else BaseQuery.ASCENDING
        try:
            statement = self._readings
            if query.created_from is not None:
                statement = statement.where(
                    filter=FieldFilter(CREATED_AT_FIELD, ">=", query.created_from)
                )
            if query.created_to is not None:
                statement = statement.where(
                    filter=FieldFilter(CREATED_AT_FIELD, "<=", query.created_to)
                )
            statement = statement.order_by(query.order_by, direction=direction).limit(
                query.limit
            )
            return [
                StoredReading(id=snapshot.id, fields=snapshot.to_dict() or {})
                async for snapshot in statement.stream()
            ]
        except _BACKEND_ERRORS as exc:
            raise ReadingStoreError(str(exc)) from exc

    async def delete(self, reading_id: str) -> None:
        try:
            await self._readings.document(reading_id).delete()
        except _BACKEND_ERRORS as exc:
            raise ReadingStoreError(str(exc)) from exc

    async def close(self) -> None:
        if self._app is None:
            return
        firebase_admin.delete_app(self._app)
        self._app = None
        logger.info("Firebase app released", extra={"account": self.account})
