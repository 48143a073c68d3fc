"""Error envelope for the HTTP API.

Every error body carries an ``error`` label plus operation-specific keys
(``required``, ``id``, ``message`` or ``details``).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, **details: Any) -> None:
        super().__init__(error)
        self.error = error
        self.details = details

    def to_response(self) -> dict[str, Any]:
        return {"error": self.error, **self.details}


class InvalidRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class ReadingNotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, reading_id: str) -> None:
        super().__init__("Data not found", id=reading_id)


class UpstreamError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Render ``ApiError`` subclasses and unexpected exceptions as JSON."""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error}",
            extra={"reason": exc.details.get("message") or exc.details.get("details")},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(exc)},
        )
