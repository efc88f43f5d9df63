"""Global exception handlers — map domain errors to HTTP responses."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
import structlog

from fitcoach.domain.exceptions import (
    CapabilityUnavailableError,
    DomainError,
    ProviderError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


def _error(status_code: int, code: str, message: str, details: dict | None = None) -> ORJSONResponse:  # type: ignore[type-arg]
    content: dict = {"code": code, "message": message}  # type: ignore[type-arg]
    if details:
        content["details"] = details
    return ORJSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all domain→HTTP exception mappings."""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        fields = sorted(
            {".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()}
        )
        return _error(
            422,
            "VALIDATION_ERROR",
            "Request body failed validation",
            {"fields": [f for f in fields if f]},
        )

    @app.exception_handler(ValidationError)
    async def handle_validation(request: Request, exc: ValidationError) -> ORJSONResponse:
        return _error(422, exc.code, exc.message)

    @app.exception_handler(CapabilityUnavailableError)
    async def handle_unavailable(
        request: Request, exc: CapabilityUnavailableError
    ) -> ORJSONResponse:
        logger.error("capability_unavailable_http", path=request.url.path, message=exc.message)
        return _error(503, exc.code, exc.message)

    @app.exception_handler(ProviderError)
    async def handle_provider(request: Request, exc: ProviderError) -> ORJSONResponse:
        logger.error("provider_error_http", provider=exc.provider, message=exc.message)
        return _error(502, exc.code, exc.message)

    @app.exception_handler(DomainError)
    async def handle_domain(request: Request, exc: DomainError) -> ORJSONResponse:
        return _error(400, exc.code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception("unhandled_exception", error=str(exc))
        return _error(500, "INTERNAL_ERROR", "An unexpected error occurred")
