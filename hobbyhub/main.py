"""
FastAPI application setup.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from sqlalchemy import text

from hobbyhub.config.settings import get_settings
from hobbyhub.core.db import SessionLocal, create_tables
from hobbyhub.core.error_handlers import error_handler, setup_error_handlers
from hobbyhub.core.logging import configure_logging
from hobbyhub.middleware import RequestContextMiddleware
from hobbyhub.services.geocoding import GeocodingClient

settings = get_settings()

configure_logging(
    level=settings.log_level.value,
    fmt=settings.log_format,
    json_output=settings.log_json or settings.log_format.lower() == "json",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup creates missing tables (when enabled) and the shared geocoding
    client; shutdown closes the client.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment.value})")

    if settings.database.auto_create:
        create_tables()
        logger.info("Database tables ensured")

    app.state.geocoding_client = GeocodingClient(settings.geocoding)
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Shutting down application")
        client = getattr(app.state, "geocoding_client", None)
        if client is not None:
            await client.aclose()
            app.state.geocoding_client = None
        logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        **settings.get_cors_config()
    )
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from hobbyhub.api import auth_router, event_router, hobby_router, user_router
    app.include_router(auth_router)
    app.include_router(event_router)
    app.include_router(hobby_router)
    app.include_router(user_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running"
        }

    @app.get("/health")
    async def health_check():
        """Database connectivity plus error counters."""
        database = {"status": "healthy"}
        try:
            with SessionLocal() as db:
                db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            database = {"status": "unhealthy"}

        return {
            "status": "healthy" if database["status"] == "healthy" else "unhealthy",
            "version": settings.app_version,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": {"database": database},
            "error_statistics": error_handler.get_error_statistics(),
        }

    return app


# Create application instance
app = create_app()
