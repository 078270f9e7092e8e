"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from blob_text_extractor import __version__
from blob_text_extractor.config import get_settings
from blob_text_extractor.log_config import configure_logging
from blob_text_extractor.routes import events_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan events."""
    settings = get_settings()

    configure_logging(settings.log_level, settings.app_name)

    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=__version__,
        environment=settings.environment,
        ocr_client=settings.ocr_client,
        translation_enabled=settings.translation_enabled,
    )

    yield

    logger.info("shutting_down_application")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Extracts text from newly created blobs and stores it next to them",
        lifespan=lifespan,
    )

    app.include_router(events_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "service": settings.app_name,
        }

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": __version__,
            "status": "running",
        }

    logger.info(
        "application_created",
        routes_count=len(app.routes),
    )

    return app


app = create_app()
