"""Dependency injection container — wires adapters to ports.

FastAPI's ``Depends()`` system uses these factories to inject the
orchestrator-backed service into route handlers.  Request-time factories
read the ``Settings`` the app was created with, so the provider chains and
the service limits always come from the same configuration.
"""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends, Request

from fitcoach.adapters.outbound.documents import PlanPdfRenderer
from fitcoach.adapters.outbound.providers import build_capability_policies
from fitcoach.application.services import CoachingService
from fitcoach.config import Settings, get_settings
from fitcoach.shared.providers import FallbackOrchestrator


# ── Settings ─────────────────────────────────────────────────
@lru_cache(maxsize=1)
def get_cached_settings() -> Settings:
    return get_settings()


def get_app_settings(request: Request) -> Settings:
    """The settings ``create_app`` was given."""
    return request.app.state.settings


# ── Singletons ───────────────────────────────────────────────
_http_client: httpx.AsyncClient | None = None
_orchestrator: FallbackOrchestrator | None = None


def get_http_client() -> httpx.AsyncClient:
    """Shared connection pool; per-request timeouts are set by each adapter."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            limits=httpx.Limits(max_connections=50, max_keepalive_connections=10),
            follow_redirects=True,
        )
    return _http_client


def get_orchestrator(settings: Settings | None = None) -> FallbackOrchestrator:
    """Create or return the singleton fallback orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        s = settings or get_cached_settings()
        _orchestrator = FallbackOrchestrator(build_capability_policies(s, get_http_client()))
    return _orchestrator


# ── Request-scoped factories ─────────────────────────────────
def get_app_orchestrator(settings: Settings = Depends(get_app_settings)) -> FallbackOrchestrator:
    return get_orchestrator(settings)


def get_coaching_service(
    settings: Settings = Depends(get_app_settings),
    orchestrator: FallbackOrchestrator = Depends(get_app_orchestrator),
) -> CoachingService:
    return CoachingService(orchestrator, settings, renderer=PlanPdfRenderer())


async def close_http_client() -> None:
    global _http_client, _orchestrator
    if _http_client is not None:
        await _http_client.aclose()
    _http_client = None
    _orchestrator = None
