from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import ROUTE_CATALOG, router
from app.errors import register_error_handlers
from datastore.base import ReadingStore
from datastore.factory import build_store
from logging_config import configure_logging
from services.readings import ReadingService
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


def log_endpoint_summary(settings: Settings) -> None:
    logger.info(
        f"Server is listening on port {settings.port}",
        extra={"account": settings.account, "backend": settings.backend},
    )
    logger.info(f"API documentation: {settings.base_url}/routes")
    logger.info(f"Health check: {settings.base_url}/health")
    for route in ROUTE_CATALOG:
        logger.info(f"  {route.method:<6} {route.path:<12} {route.description}")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    store: ReadingStore = app.state.reading_service.store
    settings: Settings = app.state.settings
    log_endpoint_summary(settings)
    try:
        yield
    finally:
        await store.close()


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ReadingStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Sensor Readings API",
        description="Stores five-value sensor readings in a document database.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.reading_service = ReadingService(
        store=store if store is not None else build_store(settings),
        account=settings.account,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(router)
    return app


def run() -> None:
    """Serve the API with uvicorn on the configured port."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
