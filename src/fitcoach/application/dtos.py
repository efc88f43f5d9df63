"""Data Transfer Objects — Pydantic models for API boundaries.

Field names on the wire are camelCase to match the existing web client;
Python attributes stay snake_case.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# ═══════════════════════════════════════════════════════════════
#  Common
# ═══════════════════════════════════════════════════════════════
class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict | None = None  # type: ignore[type-arg]


class ProviderChainEntry(BaseModel):
    provider_id: str
    credential_present: bool
    timeout_s: float


class CapabilityChainResponse(BaseModel):
    providers: list[ProviderChainEntry]
    has_degraded_result: bool


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    environment: str = "development"
    timestamp: datetime
    uptime_seconds: float
    apis: dict[str, bool] = Field(default_factory=dict)
    capabilities: dict[str, CapabilityChainResponse] = Field(default_factory=dict)
    endpoints: dict[str, str] = Field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════
#  Plan generation
# ═══════════════════════════════════════════════════════════════
class PlanRequest(_CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., gt=0, lt=130)
    gender: str | None = None
    height: float = Field(..., gt=0, lt=300, description="Height in centimetres")
    weight: float = Field(..., gt=0, lt=700, description="Weight in kilograms")
    goal: str | None = None
    fitness_level: str | None = Field(None, alias="fitnessLevel")
    location: str | None = None
    diet: str | None = None
    medical_history: str | None = Field(None, alias="medicalHistory", max_length=2000)
    stress_level: str | None = Field(None, alias="stressLevel")


# ═══════════════════════════════════════════════════════════════
#  Image lookup
# ═══════════════════════════════════════════════════════════════
class ImageRequest(_CamelModel):
    item_name: str = Field(..., alias="itemName", min_length=1, max_length=200)
    type: str = Field(..., min_length=1, examples=["exercise", "meal"])


class ImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl")


# ═══════════════════════════════════════════════════════════════
#  Speech synthesis
# ═══════════════════════════════════════════════════════════════
class SpeechRequest(BaseModel):
    """``text`` may be a string or any JSON value (e.g. a whole plan)."""

    text: Any

    @field_validator("text")
    @classmethod
    def _require_text(cls, v: Any) -> Any:
        if not v:
            raise ValueError("text must not be empty")
        return v

    def as_text(self) -> str:
        if isinstance(self.text, str):
            return self.text
        return json.dumps(self.text, separators=(",", ":"), ensure_ascii=False)


# ═══════════════════════════════════════════════════════════════
#  Motivation
# ═══════════════════════════════════════════════════════════════
class QuoteResponse(BaseModel):
    quote: str
