"""FastAPI application for the ReadItOut API.

This module provides the application factory with:
- Podcast and share-link routes
- Error handling
- Static serving of locally stored audio
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import structlog

from .. import __version__
from ..errors import ReadItOutError
from ..pipeline.service import PodcastService
from ..settings import Settings, get_settings
from .exceptions import (
    general_exception_handler,
    readitout_exception_handler,
    validation_exception_handler,
)
from .routes import health, podcasts, public

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the podcast service on startup unless one was injected."""
    owns_service = app.state.service is None
    if owns_service:
        logger.info("Starting ReadItOut API server...")
        app.state.service = await PodcastService.from_settings(app.state.settings)
        logger.info(f"Store backend: {app.state.settings.storage.backend}")

    yield

    if owns_service:
        logger.info("Shutting down, waiting for running podcasts...")
        await app.state.service.close()
        app.state.service = None


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[PodcastService] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        service: Pre-built service (tests); built in the lifespan when omitted

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="ReadItOut API",
        description="Turn articles, tweets and pasted text into narrated podcasts",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ReadItOutError, readitout_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router, tags=["Health"])
    app.include_router(podcasts.router, tags=["Podcasts"])
    app.include_router(public.router, tags=["Public"])

    audio_dir = settings.storage.audio_dir
    audio_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/audio", StaticFiles(directory=audio_dir), name="audio")

    return app
