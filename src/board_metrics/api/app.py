"""
FastAPI application factory.

``create_app()`` wires settings, logging and routers into a single
``FastAPI`` instance. This is the request-handling wrapper around the
pipeline; it holds no logic of its own.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from board_metrics import __version__
from board_metrics.core.settings import BoardMetricsSettings, get_settings
from board_metrics.framework.logging import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown hooks."""
    settings: BoardMetricsSettings = app.state.settings
    configure_logging(level=settings.log_level, format=settings.log_format)

    log = get_logger("board_metrics.api")
    log.info("api.start", version=app.version, repo=f"{settings.owner}/{settings.repo}")
    yield
    log.info("api.stop")


def create_app(*, settings: BoardMetricsSettings | None = None) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : BoardMetricsSettings | None
        Override settings (useful for testing). When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    from board_metrics.api.routers import health, metrics

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(metrics.router, prefix=settings.api_prefix)

    return app
