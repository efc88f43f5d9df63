"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from typing import Any

import pytest

from fitcoach.config import Settings, get_settings
from fitcoach.ports.outbound import ProviderAdapter

VALID_PLAN: dict[str, Any] = {
    "workoutPlan": [
        {
            "day": "Monday",
            "exercises": [{"name": "Push-up", "sets": "3", "reps": "12", "rest": "60 seconds"}],
        },
        {
            "day": "Tuesday",
            "exercises": [{"name": "Squat", "sets": 4, "reps": 10, "rest": "90 seconds"}],
        },
    ],
    "dietPlan": {
        "breakfast": [{"name": "Oatmeal", "calories": 400, "protein": 25}],
        "lunch": [{"name": "Chicken salad", "calories": 550, "protein": 35}],
    },
    "tips": ["Drink water", "Sleep 8 hours"],
}


class FakeAdapter(ProviderAdapter):
    """Scripted provider: returns ``result``, raises ``error`` or sleeps ``delay`` first."""

    def __init__(
        self,
        provider_id: str,
        *,
        result: Any = None,
        error: BaseException | None = None,
        delay: float = 0.0,
    ) -> None:
        self.provider_id = provider_id
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: list[Mapping[str, Any]] = []
        self.closed = False

    async def invoke(self, request: Mapping[str, Any], timeout: float) -> Any:
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def plan_text() -> str:
    return json.dumps(VALID_PLAN)


@pytest.fixture
def settings() -> Settings:
    return get_settings(
        _env_file=None,
        gemini_api_key="test-gemini",
        openai_api_key="test-openai",
        replicate_api_key="test-replicate",
        elevenlabs_api_key="test-elevenlabs",
    )


@pytest.fixture
def bare_settings() -> Settings:
    """No credentials for any provider."""
    return get_settings(
        _env_file=None,
        gemini_api_key="",
        openai_api_key="",
        replicate_api_key="",
        elevenlabs_api_key="",
    )
