"""FastAPI application entry-point.

Assembles routers, middleware, exception handlers, and lifecycle hooks.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from fitcoach.adapters.inbound.rest.routers import api_router, health_router, metrics_router
from fitcoach.config import Settings
from fitcoach.dependencies import close_http_client, get_cached_settings, get_orchestrator
from fitcoach.shared.errors import register_exception_handlers
from fitcoach.shared.middleware import LoggingMiddleware, MetricsMiddleware, RequestIdMiddleware
from fitcoach.shared.observability import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifecycle — startup & shutdown hooks."""
    settings: Settings = app.state.settings
    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.is_production,
    )
    logger.info(
        "application_starting",
        env=settings.app_env.value,
        apis=settings.credentials(),
    )

    # Chains are frozen here, before the first request
    get_orchestrator(settings)

    yield
    await close_http_client()
    logger.info("application_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory — creates a fully configured FastAPI instance."""
    settings = settings or get_cached_settings()

    app = FastAPI(
        title="Fitness Coach API",
        description=(
            "Personalised fitness plans, exercise and meal imagery, spoken plans, PDF "
            "exports and motivation quotes, each served through an ordered chain of generative providers."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ── Middleware (first added = innermost) ─────────────────
    cors_origins = settings.cors_origins
    allow_all_origins = "*" in cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all_origins else cors_origins,
        allow_credentials=not allow_all_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    # ── Exception handlers ───────────────────────────────────
    register_exception_handlers(app)

    # ── Routers ──────────────────────────────────────────────
    app.include_router(health_router)
    if settings.prometheus_enabled:
        app.include_router(metrics_router)
    app.include_router(api_router)

    return app


# Uvicorn entry-point
app = create_app()


def run() -> None:
    """Console entry-point: serve the app with uvicorn."""
    import uvicorn

    settings = get_cached_settings()
    uvicorn.run(
        "fitcoach.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_config=None,
    )


if __name__ == "__main__":
    run()
