"""Process-wide logging: one stderr handler, UTC times, ``key=value`` context."""

from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Any, Iterable, Sequence

from settings import get_settings

# Attributes callers pass through ``extra=`` that are worth printing.
CONTEXT_KEYS = (
    "account",
    "reading_id",
    "backend",
    "order_by",
    "direction",
    "limit",
    "start",
    "end",
    "count",
    "reason",
)

# Google and HTTP client libraries log each RPC at INFO.
QUIET_LOGGERS = ("google", "grpc", "urllib3", "httpx", "httpcore")

LINE_FORMAT = "%(asctime)sZ %(levelname)-7s %(name)s: %(message)s"
TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

_configured = False


def _render(value: Any) -> str:
    text = str(value)
    if not text or any(char.isspace() for char in text):
        return repr(text)
    return text


class ContextualFormatter(logging.Formatter):
    """Appends the record's context attributes after the message."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        context_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self.context_keys: Sequence[str] = tuple(context_keys or CONTEXT_KEYS)

    def context_of(self, record: logging.LogRecord) -> list[str]:
        pairs = ((key, getattr(record, key, None)) for key in self.context_keys)
        return [f"{key}={_render(value)}" for key, value in pairs if value is not None]

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = self.context_of(record)
        return f"{line} | {' '.join(context)}" if context else line


def build_logging_config(level: str | int) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "contextual": {
                "()": ContextualFormatter,
                "fmt": LINE_FORMAT,
                "datefmt": TIME_FORMAT,
            }
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "contextual",
            }
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str | int | None = None) -> None:
    """Install the logging setup once per process; later calls are no-ops."""
    global _configured
    if _configured:
        return
    dictConfig(build_logging_config(level if level is not None else get_settings().log_level))
    _configured = True
