"""
FastAPI application factory — entry point for the VidShare backend.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidshare.api.v1.router import v1_router
from vidshare.config import Settings, settings as default_settings
from vidshare.db.session import Database
from vidshare.middleware.error_handler import (
    ErrorHandlerMiddleware,
    RequestIdMiddleware,
    register_error_handlers,
)
from vidshare.storage.factory import create_storage

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown hooks."""
        logging.basicConfig(level=settings.LOG_LEVEL)

        # The connection pool lives for the whole process.
        database = Database.from_settings(settings)
        # Dev convenience; production schemas are managed out of band.
        await database.create_all()
        app.state.db = database
        app.state.storage = create_storage(settings)
        logger.info("VidShare started (storage backend: %s)", settings.STORAGE_BACKEND)

        yield

        await database.dispose()

    app = FastAPI(
        title="VidShare API",
        description="Video sharing backend: users, uploads, comments and likes.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Middleware ───────────────────────────────────────
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # ── API Routes ───────────────────────────────────────
    app.include_router(v1_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "vidshare.main:app",
        host=default_settings.BACKEND_HOST,
        port=default_settings.BACKEND_PORT,
        reload=True,
    )
