"""
FastAPI application factory.

Owns the process-wide handles (record store, broadcast channel, settings) on
``app.state``; they are created when the app starts and released on shutdown.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from services.api import realtime, users
from utils.broadcast import BroadcastChannel
from utils.config import Settings, get_settings
from utils.db import RecordStore, StorageError
from utils.export import SerializationError
from utils.logging import get_logger

logger = get_logger(__name__)


async def _storage_error_handler(request: Request, exc: StorageError) -> PlainTextResponse:
    logger.error(
        "Storage error: %s",
        exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return PlainTextResponse(str(exc), status_code=500)


async def _serialization_error_handler(
    request: Request, exc: SerializationError
) -> PlainTextResponse:
    logger.error(
        "Export failed: %s",
        exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return PlainTextResponse(str(exc), status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Explicit settings, defaults to the cached environment settings

    Returns:
        Configured FastAPI app; handles are initialized by its lifespan
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = RecordStore(settings.SQLITE_PATH, timeout=settings.SQLITE_TIMEOUT)
        try:
            store.init_schema()
        except StorageError as e:
            logger.error("Error creating users table: %s", e, extra={"path": settings.SQLITE_PATH})
            raise

        app.state.store = store
        app.state.channel = BroadcastChannel()
        logger.info(
            "%s started",
            settings.APP_NAME,
            extra={"environment": settings.ENVIRONMENT, "db_path": settings.SQLITE_PATH},
        )

        try:
            yield
        finally:
            await app.state.channel.close()
            logger.info("%s shutdown complete", settings.APP_NAME)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.CORS_ORIGIN],
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )
    app.add_exception_handler(StorageError, _storage_error_handler)
    app.add_exception_handler(SerializationError, _serialization_error_handler)

    app.include_router(users.router)
    app.include_router(realtime.router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}

    return app
