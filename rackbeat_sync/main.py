"""
Rackbeat Shopify Sync - HTTP application
"""

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .auth import SessionManager
from .config import Settings, load_settings
from .db import SQLiteDatabase
from .routes import auth_router, logs_router, sync_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings instance."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown."""
        logger.info("Starting Rackbeat Shopify Sync...")
        db = SQLiteDatabase(settings.database_path)
        await db.initialize()
        app.state.db = db
        logger.info("Application ready")
        yield
        logger.info("Shutting down...")
        task = app.state.sync_task
        if task is not None and not task.done():
            logger.warning("Shutting down while a sync is running")
            task.cancel()
        await db.close()

    app = FastAPI(
        title="Rackbeat Shopify Sync",
        description="Mirror the Rackbeat product catalog into Shopify",
        version=__version__,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.db = None
    app.state.session_manager = SessionManager(settings.session_secret)
    app.state.failed_logins = defaultdict(list)
    app.state.sync_task = None

    app.include_router(auth_router)
    app.include_router(sync_router)
    app.include_router(logs_router)

    @app.get("/health")
    async def health():
        """Health check endpoint (no auth required)."""
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(
        "rackbeat_sync.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )
