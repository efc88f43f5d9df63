"""Health, Metrics and Coaching — REST routers."""

from __future__ import annotations

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from fitcoach.application.dtos import (
    ErrorResponse,
    HealthResponse,
    ImageRequest,
    ImageResponse,
    PlanRequest,
    QuoteResponse,
    SpeechRequest,
)
from fitcoach.application.services import CoachingService
from fitcoach.config import Settings
from fitcoach.dependencies import get_app_orchestrator, get_app_settings, get_coaching_service
from fitcoach.domain.results import FitnessPlan
from fitcoach.shared.providers import FallbackOrchestrator

_STARTED_AT = time.monotonic()

ENDPOINTS: dict[str, str] = {
    "generatePlan": "POST /api/generate-plan",
    "generateImage": "POST /api/generate-image",
    "textToSpeech": "POST /api/text-to-speech",
    "exportPdf": "POST /api/export-pdf",
    "motivation": "GET /api/motivation",
    "health": "GET /health",
}


# ═══════════════════════════════════════════════════════════════
#  Health
# ═══════════════════════════════════════════════════════════════
health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    orchestrator: FallbackOrchestrator = Depends(get_app_orchestrator),
) -> HealthResponse:
    endpoints = dict(ENDPOINTS)
    if settings.prometheus_enabled:
        endpoints["metrics"] = "GET /metrics"
    return HealthResponse(
        status="ok",
        environment=settings.app_env.value,
        timestamp=datetime.now(timezone.utc),
        uptime_seconds=round(time.monotonic() - _STARTED_AT, 3),
        apis=settings.credentials(),
        capabilities=orchestrator.describe(),  # type: ignore[arg-type]
        endpoints=endpoints,
    )


# ═══════════════════════════════════════════════════════════════
#  Metrics (mounted only when prometheus_enabled)
# ═══════════════════════════════════════════════════════════════
metrics_router = APIRouter(tags=["Health"])


@metrics_router.get("/metrics")
async def prometheus_metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


# ═══════════════════════════════════════════════════════════════
#  Coaching
# ═══════════════════════════════════════════════════════════════
api_router = APIRouter(prefix="/api", tags=["Coaching"])

_UNAVAILABLE = {503: {"model": ErrorResponse, "description": "Every provider failed"}}


@api_router.post(
    "/generate-plan",
    response_model=FitnessPlan,
    response_model_by_alias=True,
    responses=_UNAVAILABLE,
)
async def generate_plan(
    body: PlanRequest,
    service: CoachingService = Depends(get_coaching_service),
) -> FitnessPlan:
    return await service.generate_plan(body)


@api_router.post("/generate-image", response_model=ImageResponse, response_model_by_alias=True)
async def generate_image(
    body: ImageRequest,
    service: CoachingService = Depends(get_coaching_service),
) -> ImageResponse:
    result = await service.generate_image(body.item_name, body.type)
    return ImageResponse(image_url=result.image_url)


@api_router.post(
    "/text-to-speech",
    response_class=Response,
    responses={200: {"content": {"audio/mpeg": {}}}, **_UNAVAILABLE},
)
async def text_to_speech(
    body: SpeechRequest,
    service: CoachingService = Depends(get_coaching_service),
) -> Response:
    speech = await service.synthesize_speech(body)
    return Response(
        content=speech.audio_bytes,
        media_type=speech.media_type,
        headers={"Cache-Control": "no-cache"},
    )


@api_router.post(
    "/export-pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def export_pdf(
    body: FitnessPlan,
    service: CoachingService = Depends(get_coaching_service),
) -> Response:
    document, filename = await service.export_plan(body)
    return Response(
        content=document,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@api_router.get("/motivation", response_model=QuoteResponse)
async def motivation(
    service: CoachingService = Depends(get_coaching_service),
) -> QuoteResponse:
    result = await service.get_motivation()
    return QuoteResponse(quote=result.quote)
