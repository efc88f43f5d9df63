"""Tests for the coaching service and prompt builders."""

from __future__ import annotations

import json
import re
from unittest.mock import AsyncMock

import pytest

from conftest import VALID_PLAN, FakeAdapter
from fitcoach.application.dtos import PlanRequest, SpeechRequest
from fitcoach.application.prompts import (
    PLAN_SYSTEM,
    build_image_prompt,
    build_plan_prompt,
    compute_bmi,
)
from fitcoach.application.services import CoachingService
from fitcoach.domain.enums import Capability, OutcomeStatus
from fitcoach.domain.exceptions import (
    CapabilityUnavailableError,
    ProviderTransportError,
    ValidationError,
)
from fitcoach.domain.results import FitnessPlan, ImageResult, QuoteResult, SpeechResult
from fitcoach.ports.outbound import PlanRendererPort
from fitcoach.shared.providers import CapabilityPolicy, FallbackOrchestrator, ObtainResult, ProviderSpec
from fitcoach.shared.providers.degraded import FALLBACK_QUOTES, placeholder_image, random_quote
from fitcoach.shared.providers.validators import (
    validate_image,
    validate_plan,
    validate_quote,
    validate_speech,
)


@pytest.fixture
def profile() -> PlanRequest:
    return PlanRequest.model_validate(
        {
            "name": "Asha",
            "age": 29,
            "gender": "female",
            "height": 165,
            "weight": 60,
            "goal": "Muscle gain",
            "fitnessLevel": "Intermediate",
            "location": "Gym",
            "diet": "Vegetarian",
            "stressLevel": "Low",
        }
    )


def _service(settings, **adapters: FakeAdapter) -> CoachingService:
    def _spec(pid: str) -> tuple[ProviderSpec, ...]:
        return (ProviderSpec(pid, adapters[pid]),) if pid in adapters else ()

    policies = {
        Capability.PLAN_GENERATION: CapabilityPolicy(
            capability=Capability.PLAN_GENERATION,
            providers=_spec("gemini") or (ProviderSpec("gemini", FakeAdapter("gemini"), credential_present=False),),
            validator=validate_plan,
        ),
        Capability.IMAGE_LOOKUP: CapabilityPolicy(
            capability=Capability.IMAGE_LOOKUP,
            providers=_spec("replicate"),
            validator=validate_image,
            degraded=placeholder_image(settings.placeholder_image_template),
        ),
        Capability.SPEECH_SYNTHESIS: CapabilityPolicy(
            capability=Capability.SPEECH_SYNTHESIS,
            providers=_spec("elevenlabs") or (ProviderSpec("elevenlabs", FakeAdapter("elevenlabs"), credential_present=False),),
            validator=validate_speech,
        ),
        Capability.MOTIVATION_QUOTE: CapabilityPolicy(
            capability=Capability.MOTIVATION_QUOTE,
            providers=_spec("openai"),
            validator=validate_quote,
            degraded=random_quote(),
        ),
    }
    return CoachingService(FallbackOrchestrator(policies), settings)


# ═══════════════════════════════════════════════════════════════
#  Prompts
# ═══════════════════════════════════════════════════════════════
class TestPrompts:
    def test_bmi(self) -> None:
        assert compute_bmi(175, 70) == 22.86

    @pytest.mark.parametrize("height,weight", [(0, 70), (175, 0), (-1, 70)])
    def test_bmi_rejects_non_positive(self, height: float, weight: float) -> None:
        with pytest.raises(ValidationError):
            compute_bmi(height, weight)

    def test_plan_prompt_includes_profile(self, profile: PlanRequest) -> None:
        prompt = build_plan_prompt(
            name=profile.name,
            age=profile.age,
            gender=profile.gender,
            height=profile.height,
            weight=profile.weight,
            goal=profile.goal,
            fitness_level=profile.fitness_level,
            location=profile.location,
            diet=profile.diet,
            medical_history=profile.medical_history,
            stress_level=profile.stress_level,
        )
        assert "- Name: Asha" in prompt
        assert "- Height: 165cm" in prompt
        assert "- BMI: 22.04" in prompt
        assert "- Medical History: None" in prompt
        assert '"workoutPlan"' in prompt

    def test_image_prompts(self) -> None:
        assert "gym demonstration of Squat exercise" in build_image_prompt("Squat", "exercise")
        assert "Delicious and appetizing Oatmeal" in build_image_prompt("Oatmeal", "meal")


# ═══════════════════════════════════════════════════════════════
#  Plan generation
# ═══════════════════════════════════════════════════════════════
class TestGeneratePlan:
    @pytest.mark.asyncio
    async def test_success(self, settings, profile, plan_text) -> None:
        gemini = FakeAdapter("gemini", result=plan_text)
        service = _service(settings, gemini=gemini)

        plan = await service.generate_plan(profile)

        assert plan.tips
        request = gemini.calls[0]
        assert request["system_prompt"] == PLAN_SYSTEM
        assert request["temperature"] == 0.7
        assert request["max_tokens"] == 2000
        assert "Asha" in request["prompt"]

    @pytest.mark.asyncio
    async def test_unavailable(self, settings, profile) -> None:
        gemini = FakeAdapter("gemini", error=ProviderTransportError("gemini", "HTTP 500"))
        service = _service(settings, gemini=gemini)

        with pytest.raises(CapabilityUnavailableError, match="Failed to generate fitness plan"):
            await service.generate_plan(profile)


# ═══════════════════════════════════════════════════════════════
#  Image lookup
# ═══════════════════════════════════════════════════════════════
class TestGenerateImage:
    @pytest.mark.asyncio
    async def test_provider_url(self, settings) -> None:
        replicate = FakeAdapter("replicate", result="https://rep/squat.png")
        service = _service(settings, replicate=replicate)

        result = await service.generate_image("Squat", "exercise")

        assert result == ImageResult(image_url="https://rep/squat.png")
        assert replicate.calls[0]["item_name"] == "Squat"
        assert "Squat exercise" in replicate.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_placeholder_when_all_fail(self, settings) -> None:
        replicate = FakeAdapter("replicate", error=ProviderTransportError("replicate", "down"))
        service = _service(settings, replicate=replicate)

        result = await service.generate_image("Push-up", "exercise")

        assert result.image_url == "https://via.placeholder.com/512x512?text=Push-up"


# ═══════════════════════════════════════════════════════════════
#  Speech synthesis
# ═══════════════════════════════════════════════════════════════
class TestSynthesizeSpeech:
    @pytest.mark.asyncio
    async def test_success(self, settings) -> None:
        elevenlabs = FakeAdapter("elevenlabs", result=b"mp3-bytes")
        service = _service(settings, elevenlabs=elevenlabs)

        speech = await service.synthesize_speech(SpeechRequest(text="Day one"))

        assert speech == SpeechResult(audio_bytes=b"mp3-bytes")
        assert elevenlabs.calls[0] == {"text": "Day one"}

    @pytest.mark.asyncio
    async def test_structured_text_is_serialized_and_truncated(self, settings) -> None:
        elevenlabs = FakeAdapter("elevenlabs", result=b"mp3")
        service = _service(settings.model_copy(update={"speech_max_chars": 10}), elevenlabs=elevenlabs)

        await service.synthesize_speech(SpeechRequest(text={"tips": ["a", "b"]}))

        sent = elevenlabs.calls[0]["text"]
        assert sent == json.dumps({"tips": ["a", "b"]}, separators=(",", ":"))[:10]
        assert len(sent) == 10

    @pytest.mark.asyncio
    async def test_unavailable_without_credentials(self, settings) -> None:
        service = _service(settings)
        with pytest.raises(CapabilityUnavailableError, match="Failed to generate speech"):
            await service.synthesize_speech(SpeechRequest(text="hello"))

    @pytest.mark.parametrize("text", [None, "", 0, False, {}, []])
    def test_empty_text_rejected(self, text) -> None:
        with pytest.raises(ValueError, match="must not be empty"):
            SpeechRequest(text=text)

    def test_text_zero_string_accepted(self) -> None:
        assert SpeechRequest(text="0").as_text() == "0"


# ═══════════════════════════════════════════════════════════════
#  Motivation
# ═══════════════════════════════════════════════════════════════
class TestGetMotivation:
    @pytest.mark.asyncio
    async def test_provider_quote(self, settings) -> None:
        openai = FakeAdapter("openai", result="'Lift the weight, lift the mood.'")
        service = _service(settings, openai=openai)

        quote = await service.get_motivation()

        assert quote == QuoteResult(quote="Lift the weight, lift the mood.")
        assert openai.calls[0]["max_tokens"] == 50
        assert openai.calls[0]["temperature"] == 0.9

    @pytest.mark.asyncio
    async def test_pool_quote_without_providers(self, settings) -> None:
        quote = await _service(settings).get_motivation()
        assert quote.quote in FALLBACK_QUOTES

    @pytest.mark.asyncio
    async def test_unavailable_result_raises(self, settings) -> None:
        orchestrator = AsyncMock(spec=FallbackOrchestrator)
        orchestrator.obtain.return_value = ObtainResult(
            capability=Capability.MOTIVATION_QUOTE, status=OutcomeStatus.UNAVAILABLE
        )
        service = CoachingService(orchestrator, settings)

        with pytest.raises(CapabilityUnavailableError):
            await service.get_motivation()


# ═══════════════════════════════════════════════════════════════
#  Plan export
# ═══════════════════════════════════════════════════════════════
class _StubRenderer(PlanRendererPort):
    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self) -> None:
        self.rendered: list[FitnessPlan] = []

    def render(self, plan: FitnessPlan) -> bytes:
        self.rendered.append(plan)
        return b"%PDF-stub"


class TestExportPlan:
    @pytest.mark.asyncio
    async def test_renders_plan(self, settings) -> None:
        renderer = _StubRenderer()
        orchestrator = AsyncMock(spec=FallbackOrchestrator)
        service = CoachingService(orchestrator, settings, renderer=renderer)
        plan = FitnessPlan.model_validate(VALID_PLAN)

        document, filename = await service.export_plan(plan)

        assert document == b"%PDF-stub"
        assert renderer.rendered == [plan]
        assert re.fullmatch(r"fitness-plan-\d{13}\.pdf", filename)
        orchestrator.obtain.assert_not_called()

    @pytest.mark.asyncio
    async def test_without_renderer(self, settings) -> None:
        service = CoachingService(AsyncMock(spec=FallbackOrchestrator), settings)
        with pytest.raises(CapabilityUnavailableError, match="export"):
            await service.export_plan(FitnessPlan.model_validate(VALID_PLAN))
