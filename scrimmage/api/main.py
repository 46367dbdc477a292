"""FastAPI application for the Scrimmage play engine."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scrimmage import __version__
from scrimmage.api.routers import plays_router
from scrimmage.config import get_config
from scrimmage.plays.playbook import list_plays

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Refuse to start on a broken config; log startup and shutdown."""
    config = get_config()
    errors = config.validate()
    if errors:
        raise RuntimeError(f"Invalid engine config: {'; '.join(errors)}")
    logger.info("Scrimmage API starting up (tick %.4fs, seed %s)", config.tick_rate, config.seed)
    yield
    logger.info("Scrimmage API shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Scrimmage API",
        description="American football live-play engine",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_config().cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(plays_router, prefix="/api/v1")

    @app.get("/")
    async def root() -> dict:
        """Root endpoint - API info."""
        return {
            "name": "Scrimmage API",
            "version": __version__,
            "plays": list_plays(),
            "docs": "/docs",
        }

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    return app


app = create_app()


def run_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Serve ``app`` with uvicorn."""
    logger.info("Serving on http://%s:%d", host, port)
    uvicorn.run(
        "scrimmage.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )
