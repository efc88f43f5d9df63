"""HTTP middleware: request correlation, access log tagged by capability, metrics."""

from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from fitcoach.domain.enums import Capability
from fitcoach.shared.observability.metrics import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Route -> capability whose provider chain serves it
ROUTE_CAPABILITIES: dict[str, Capability] = {
    "/api/generate-plan": Capability.PLAN_GENERATION,
    "/api/generate-image": Capability.IMAGE_LOOKUP,
    "/api/text-to-speech": Capability.SPEECH_SYNTHESIS,
    "/api/motivation": Capability.MOTIVATION_QUOTE,
}

_KNOWN_PATHS = frozenset({*ROUTE_CAPABILITIES, "/api/export-pdf", "/health", "/metrics"})
_DOC_PREFIXES = ("/docs", "/redoc", "/openapi.json")


def capability_for(path: str) -> Capability | None:
    return ROUTE_CAPABILITIES.get(path.rstrip("/") or "/")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Correlates every log line of one request.

    The caller's ``X-Request-ID`` is reused when present, otherwise a fresh
    hex id is minted.  The id, route and capability are bound to the
    structlog context for the duration of the request, so orchestrator and
    adapter events carry them without threading them through call sites.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        context = {"request_id": request_id, "route": f"{request.method} {request.url.path}"}
        capability = capability_for(request.url.path)
        if capability is not None:
            context["capability"] = capability.value

        with structlog.contextvars.bound_contextvars(**context):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access-log line per request; 5xx at error level, 4xx at warning."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 2)

        status = response.status_code
        if status >= 500:
            log = logger.error
        elif status >= 400:
            log = logger.warning
        else:
            log = logger.info
        log(
            "http_request",
            status=status,
            duration_ms=duration_ms,
            bytes=response.headers.get("content-length"),
            client=request.client.host if request.client else "unknown",
        )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collects Prometheus HTTP metrics."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration = time.monotonic() - start

        endpoint = normalize_path(request.url.path)
        HTTP_REQUESTS_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(duration)
        return response


def normalize_path(path: str) -> str:
    """Collapse unknown paths into one label to bound metric cardinality."""
    if path in _KNOWN_PATHS:
        return path
    if path.startswith(_DOC_PREFIXES):
        return "docs"
    return "other"
