"""Coaching Service.

Turns client requests into capability requests for the fallback
orchestrator and maps each outcome onto what the HTTP layer returns.
Image lookup and motivation quotes always yield something; plan
generation and speech synthesis raise ``CapabilityUnavailableError`` when
every provider in their chain has failed.  Plan export renders an already
generated plan through the document renderer and calls no provider.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import structlog

from fitcoach.application.dtos import PlanRequest, SpeechRequest
from fitcoach.application.prompts import (
    MOTIVATION_PROMPT,
    PLAN_SYSTEM,
    build_image_prompt,
    build_plan_prompt,
)
from fitcoach.config import Settings
from fitcoach.domain.enums import Capability
from fitcoach.domain.exceptions import CapabilityUnavailableError
from fitcoach.domain.results import FitnessPlan, ImageResult, QuoteResult, SpeechResult
from fitcoach.ports.outbound import PlanRendererPort
from fitcoach.shared.providers import FallbackOrchestrator, ObtainResult

logger = structlog.get_logger(__name__)

PLAN_TEMPERATURE = 0.7
PLAN_MAX_TOKENS = 2000
QUOTE_TEMPERATURE = 0.9
QUOTE_MAX_TOKENS = 50


class CoachingService:
    """Application-level façade over the fallback orchestrator."""

    def __init__(
        self,
        orchestrator: FallbackOrchestrator,
        settings: Settings,
        *,
        renderer: PlanRendererPort | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._settings = settings
        self._renderer = renderer

    # ── Plan generation ──────────────────────────────────────
    async def generate_plan(self, body: PlanRequest) -> FitnessPlan:
        log = logger.bind(user=body.name)
        log.info("plan_generation_started")

        prompt = build_plan_prompt(
            name=body.name,
            age=body.age,
            gender=body.gender,
            height=body.height,
            weight=body.weight,
            goal=body.goal,
            fitness_level=body.fitness_level,
            location=body.location,
            diet=body.diet,
            medical_history=body.medical_history,
            stress_level=body.stress_level,
        )
        result: ObtainResult[FitnessPlan] = await self._orchestrator.obtain(
            Capability.PLAN_GENERATION,
            {
                "prompt": prompt,
                "system_prompt": PLAN_SYSTEM,
                "temperature": PLAN_TEMPERATURE,
                "max_tokens": PLAN_MAX_TOKENS,
            },
        )
        plan = self._require(result, "Failed to generate fitness plan")
        log.info("plan_generation_completed", provider=result.provider_id)
        return plan

    # ── Image lookup ─────────────────────────────────────────
    async def generate_image(self, item_name: str, kind: str) -> ImageResult:
        result: ObtainResult[ImageResult] = await self._orchestrator.obtain(
            Capability.IMAGE_LOOKUP,
            {"prompt": build_image_prompt(item_name, kind), "item_name": item_name},
        )
        if result.value is None:
            raise CapabilityUnavailableError("Failed to generate image")
        logger.info(
            "image_lookup_completed",
            item=item_name,
            kind=kind,
            provider=result.provider_id,
            degraded=result.degraded,
        )
        return result.value

    # ── Speech synthesis ─────────────────────────────────────
    async def synthesize_speech(self, body: SpeechRequest) -> SpeechResult:
        text = body.as_text()[: self._settings.speech_max_chars]
        result: ObtainResult[SpeechResult] = await self._orchestrator.obtain(
            Capability.SPEECH_SYNTHESIS,
            {"text": text},
        )
        speech = self._require(result, "Failed to generate speech")
        logger.info("speech_synthesized", chars=len(text), bytes=len(speech.audio_bytes))
        return speech

    # ── Motivation ───────────────────────────────────────────
    async def get_motivation(self) -> QuoteResult:
        result: ObtainResult[QuoteResult] = await self._orchestrator.obtain(
            Capability.MOTIVATION_QUOTE,
            {
                "prompt": MOTIVATION_PROMPT,
                "temperature": QUOTE_TEMPERATURE,
                "max_tokens": QUOTE_MAX_TOKENS,
                "max_chars": self._settings.quote_max_chars,
            },
        )
        if result.value is None:
            raise CapabilityUnavailableError("Failed to fetch motivation quote")
        return result.value

    # ── Plan export ──────────────────────────────────────────
    async def export_plan(self, plan: FitnessPlan) -> tuple[bytes, str]:
        """Render *plan* off the event loop; returns the document and its filename."""
        if self._renderer is None:
            raise CapabilityUnavailableError("Plan export is not configured")
        document = await asyncio.to_thread(self._renderer.render, plan)
        filename = f"fitness-plan-{int(time.time() * 1000)}.{self._renderer.extension}"
        logger.info("plan_exported", filename=filename, bytes=len(document))
        return document, filename

    # ── Internals ────────────────────────────────────────────
    @staticmethod
    def _require(result: ObtainResult[Any], message: str) -> Any:
        if not result.ok or result.value is None:
            logger.error(
                "capability_request_failed",
                capability=result.capability.value,
                failures=result.failure_summary(),
                skipped=list(result.skipped),
            )
            raise CapabilityUnavailableError(message)
        return result.value
