from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import find_dotenv, load_dotenv


_PORT_ENV = "PORT"
_PROJECT_ID_ENV = "PROJECT_ID"
_CLIENT_EMAIL_ENV = "CLIENT_EMAIL"
_PRIVATE_KEY_ENV = "RSA"
_ACCOUNT_ENV = "EMAIL"
_COLLECTION_ENV = "READINGS_COLLECTION"
_BACKEND_ENV = "READINGS_BACKEND"
_MEMORY_PATH_ENV = "MEMORY_STORE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"

BACKEND_FIRESTORE = "firestore"
BACKEND_MEMORY = "memory"
_BACKENDS = (BACKEND_FIRESTORE, BACKEND_MEMORY)


@dataclass(frozen=True)
class Settings:
    port: int = 3001
    project_id: Optional[str] = None
    client_email: Optional[str] = None
    private_key: Optional[str] = None
    account: str = "default"
    collection: str = "dataCollection"
    backend: str = BACKEND_FIRESTORE
    memory_store_path: Optional[str] = None
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        return f"http://localhost:{self.port}"


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_port(default: int) -> int:
    value = os.getenv(_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_private_key() -> Optional[str]:
    value = _read_optional_env(_PRIVATE_KEY_ENV, None)
    if value is None:
        return None
    # Keys pasted into .env files usually carry escaped newlines.
    return value.replace("\\n", "\n")


def _read_backend(default: str) -> str:
    candidate = _read_str_env(_BACKEND_ENV, default).lower()
    return candidate if candidate in _BACKENDS else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        port=_read_port(3001),
        project_id=_read_optional_env(_PROJECT_ID_ENV, None),
        client_email=_read_optional_env(_CLIENT_EMAIL_ENV, None),
        private_key=_read_private_key(),
        account=_read_str_env(_ACCOUNT_ENV, "default"),
        collection=_read_str_env(_COLLECTION_ENV, "dataCollection"),
        backend=_read_backend(BACKEND_FIRESTORE),
        memory_store_path=_read_optional_env(_MEMORY_PATH_ENV, None),
        log_level=_read_log_level("INFO"),
    )
