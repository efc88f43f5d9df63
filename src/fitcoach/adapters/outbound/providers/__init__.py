"""Generative provider adapters and the startup wiring of fallback chains.

Each provider-specific HTTP call is a pure function behind
``ProviderAdapter.invoke``.  ``build_capability_policies`` reads settings
once and freezes, per capability, the ordered chain, the validator and the
degraded supplier the orchestrator will use for the life of the process.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import structlog

from fitcoach.adapters.outbound.providers.elevenlabs import ElevenLabsSpeechAdapter
from fitcoach.adapters.outbound.providers.gemini import GeminiTextAdapter
from fitcoach.adapters.outbound.providers.openai import OpenAIChatAdapter, OpenAIImageAdapter
from fitcoach.adapters.outbound.providers.replicate import ReplicateImageAdapter
from fitcoach.config import Settings
from fitcoach.domain.enums import Capability, ProviderId
from fitcoach.ports.outbound import ProviderAdapter
from fitcoach.shared.providers.degraded import placeholder_image, random_quote
from fitcoach.shared.providers.types import CapabilityPolicy, ProviderSpec
from fitcoach.shared.providers.validators import (
    validate_image,
    validate_plan,
    validate_quote,
    validate_speech,
)

logger = structlog.get_logger(__name__)

# (settings, client) → adapter
AdapterFactory = Callable[[Settings, httpx.AsyncClient], ProviderAdapter]


def _gemini(s: Settings, client: httpx.AsyncClient) -> ProviderAdapter:
    return GeminiTextAdapter(
        s.gemini_api_key, model=s.gemini_model, base_url=s.gemini_base_url, client=client
    )


def _openai_chat(s: Settings, client: httpx.AsyncClient) -> ProviderAdapter:
    return OpenAIChatAdapter(
        s.openai_api_key, model=s.openai_model, base_url=s.openai_base_url, client=client
    )


def _openai_images(s: Settings, client: httpx.AsyncClient) -> ProviderAdapter:
    return OpenAIImageAdapter(
        s.openai_api_key, model=s.openai_image_model, base_url=s.openai_base_url, client=client
    )


def _replicate(s: Settings, client: httpx.AsyncClient) -> ProviderAdapter:
    return ReplicateImageAdapter(
        s.replicate_api_key,
        model_version=s.replicate_model_version,
        base_url=s.replicate_base_url,
        request_timeout_s=s.image_request_timeout_seconds,
        poll_interval_s=s.image_poll_interval_seconds,
        max_polls=s.image_poll_max_attempts,
        client=client,
    )


def _elevenlabs(s: Settings, client: httpx.AsyncClient) -> ProviderAdapter:
    return ElevenLabsSpeechAdapter(
        s.elevenlabs_api_key,
        voice_id=s.elevenlabs_voice_id,
        model_id=s.elevenlabs_model_id,
        base_url=s.elevenlabs_base_url,
        client=client,
    )


_FACTORIES: dict[Capability, dict[str, AdapterFactory]] = {
    Capability.PLAN_GENERATION: {
        ProviderId.GEMINI.value: _gemini,
        ProviderId.OPENAI.value: _openai_chat,
    },
    Capability.IMAGE_LOOKUP: {
        ProviderId.REPLICATE.value: _replicate,
        ProviderId.OPENAI_IMAGES.value: _openai_images,
    },
    Capability.SPEECH_SYNTHESIS: {
        ProviderId.ELEVENLABS.value: _elevenlabs,
    },
    Capability.MOTIVATION_QUOTE: {
        ProviderId.GEMINI.value: _gemini,
        ProviderId.OPENAI.value: _openai_chat,
    },
}


def _timeout_for(s: Settings, capability: Capability, provider_id: str) -> float:
    if capability == Capability.PLAN_GENERATION:
        if provider_id == ProviderId.GEMINI.value:
            return s.plan_gemini_timeout_seconds
        return s.plan_openai_timeout_seconds
    if capability == Capability.IMAGE_LOOKUP:
        if provider_id == ProviderId.REPLICATE.value:
            return s.image_job_timeout_seconds
        return s.image_request_timeout_seconds
    if capability == Capability.SPEECH_SYNTHESIS:
        return s.speech_timeout_seconds
    return s.quote_timeout_seconds


def build_capability_policies(
    settings: Settings,
    client: httpx.AsyncClient,
) -> dict[Capability, CapabilityPolicy[Any]]:
    """Build every capability's immutable fallback policy from settings."""
    credentials = settings.credentials()

    def _chain(capability: Capability) -> tuple[ProviderSpec, ...]:
        factories = _FACTORIES[capability]
        return tuple(
            ProviderSpec(
                provider_id=pid,
                adapter=factories[pid](settings, client),
                timeout_s=_timeout_for(settings, capability, pid),
                credential_present=credentials.get(pid, False),
            )
            for pid in settings.provider_order(capability)
        )

    policies: dict[Capability, CapabilityPolicy[Any]] = {
        Capability.PLAN_GENERATION: CapabilityPolicy(
            capability=Capability.PLAN_GENERATION,
            providers=_chain(Capability.PLAN_GENERATION),
            validator=validate_plan,
        ),
        Capability.IMAGE_LOOKUP: CapabilityPolicy(
            capability=Capability.IMAGE_LOOKUP,
            providers=_chain(Capability.IMAGE_LOOKUP),
            validator=validate_image,
            degraded=placeholder_image(settings.placeholder_image_template),
        ),
        Capability.SPEECH_SYNTHESIS: CapabilityPolicy(
            capability=Capability.SPEECH_SYNTHESIS,
            providers=_chain(Capability.SPEECH_SYNTHESIS),
            validator=validate_speech,
        ),
        Capability.MOTIVATION_QUOTE: CapabilityPolicy(
            capability=Capability.MOTIVATION_QUOTE,
            providers=_chain(Capability.MOTIVATION_QUOTE),
            validator=validate_quote,
            degraded=random_quote(),
        ),
    }

    for capability, policy in policies.items():
        logger.info(
            "capability_chain_configured",
            capability=capability.value,
            providers=[s.provider_id for s in policy.providers],
            credentials=[s.credential_present for s in policy.providers],
            degraded=policy.has_degraded,
        )
    return policies


__all__ = [
    "ElevenLabsSpeechAdapter",
    "GeminiTextAdapter",
    "OpenAIChatAdapter",
    "OpenAIImageAdapter",
    "ReplicateImageAdapter",
    "build_capability_policies",
]
