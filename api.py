"""
Capsule FastAPI Application

Main entry point for the Capsule API: accounts, rooms, uploads and
calendar linking.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB

# App-specific imports
from app.config import Settings, get_settings
from app.dependencies import init_services
from app.errors import register_exception_handlers

# Import routers
from app.routers import (
    auth_router,
    rooms_router,
    uploads_router,
    calendar_router,
)

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Configuration is only checked when the app starts, so importing this
    module never requires environment variables.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    db = MongoDB()

    # =========================================================================
    # Application Lifespan
    # =========================================================================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Connect to the database and build services on startup;
        disconnect on shutdown.
        """
        logger.info("Starting Capsule API...")

        # Fatal: the process must not serve without these
        settings.validate_required()

        for name in settings.missing_optional():
            logger.warning(f"{name} is not set; the feature using it will fail on use")

        await db.connect(
            uri=settings.MONGODB_URI,
            database_name=settings.MONGODB_DATABASE,
            document_models=[],
        )

        app.state.services = await init_services(db.db, settings)
        logger.info("Capsule API started successfully!")

        yield

        # Shutdown
        logger.info("Shutting down Capsule API...")
        await db.disconnect()
        logger.info("Capsule API shut down complete.")

    # =========================================================================
    # FastAPI Application
    # =========================================================================
    app = FastAPI(
        title="Capsule API",
        description="Accounts, time-capsule rooms, photo uploads and calendar linking",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development() else None,
        redoc_url="/redoc" if settings.is_development() else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(rooms_router)
    app.include_router(uploads_router)
    app.include_router(calendar_router)

    @app.get("/health", tags=["Health"])
    async def health():
        """Liveness probe with database connection status."""
        return {"ok": True, "database": db.is_connected}

    return app


app = create_app()


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
