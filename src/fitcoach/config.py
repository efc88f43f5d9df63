"""Fitness Coach backend — Application Configuration."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fitcoach.domain.enums import Capability, ProviderId


class Environment(str, enum.Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


# Providers each capability knows how to build an adapter for
SUPPORTED_PROVIDERS: dict[Capability, frozenset[str]] = {
    Capability.PLAN_GENERATION: frozenset({ProviderId.GEMINI.value, ProviderId.OPENAI.value}),
    Capability.IMAGE_LOOKUP: frozenset({ProviderId.REPLICATE.value, ProviderId.OPENAI_IMAGES.value}),
    Capability.SPEECH_SYNTHESIS: frozenset({ProviderId.ELEVENLABS.value}),
    Capability.MOTIVATION_QUOTE: frozenset({ProviderId.GEMINI.value, ProviderId.OPENAI.value}),
}


def parse_provider_order(value: str) -> tuple[str, ...]:
    """``"gemini, openai"`` → ``("gemini", "openai")`` (order kept, duplicates dropped)."""
    order: list[str] = []
    for name in value.split(","):
        name = name.strip().lower()
        if name and name not in order:
            order.append(name)
    return tuple(order)


class Settings(BaseSettings):
    """Centralised, validated configuration loaded from environment / .env file.

    Read once at startup; the provider chains built from it never change
    for the life of the process.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ── Application ──────────────────────────────────────────
    app_name: str = "fitcoach"
    app_env: Environment = Environment.DEVELOPMENT
    app_debug: bool = False
    app_host: str = "0.0.0.0"
    app_port: int = 5000
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # ── Provider credentials (empty = absent) ────────────────
    gemini_api_key: str = ""
    openai_api_key: str = ""
    elevenlabs_api_key: str = ""
    replicate_api_key: str = ""

    # ── Provider endpoints / models ──────────────────────────
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.5-flash-lite"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    openai_image_model: str = "dall-e-2"
    replicate_base_url: str = "https://api.replicate.com/v1"
    replicate_model_version: str = "a45f82a1d6c31f76a91ff8a8e66f69671123bb46ef812d1da7066aaad44c0215"
    elevenlabs_base_url: str = "https://api.elevenlabs.io/v1"
    elevenlabs_voice_id: str = "21m00Tcm4TlvDq8ikWAM"
    elevenlabs_model_id: str = "eleven_monolingual_v1"

    # ── Fallback chains (comma-separated, first = preferred) ─
    plan_providers: str = "gemini,openai"
    image_providers: str = "replicate,openai_images"
    speech_providers: str = "elevenlabs"
    quote_providers: str = "gemini,openai"

    # ── Per-attempt timeouts (seconds) ───────────────────────
    plan_gemini_timeout_seconds: float = Field(300.0, gt=0)
    plan_openai_timeout_seconds: float = Field(30.0, gt=0)
    image_request_timeout_seconds: float = Field(30.0, gt=0)
    image_job_timeout_seconds: float = Field(120.0, gt=0)
    speech_timeout_seconds: float = Field(30.0, gt=0)
    quote_timeout_seconds: float = Field(10.0, gt=0)

    # ── Async image jobs ─────────────────────────────────────
    image_poll_interval_seconds: float = Field(1.0, ge=0)
    image_poll_max_attempts: int = Field(60, ge=1)

    # ── Limits / degraded output ─────────────────────────────
    speech_max_chars: int = Field(4000, ge=1)
    quote_max_chars: int = Field(200, ge=1, le=200)
    placeholder_image_template: str = "https://via.placeholder.com/512x512?text={item}"

    # ── Observability ────────────────────────────────────────
    prometheus_enabled: bool = True

    # ── Derived helpers ──────────────────────────────────────
    @property
    def is_production(self) -> bool:
        return self.app_env == Environment.PRODUCTION

    def provider_order(self, capability: Capability) -> tuple[str, ...]:
        raw = {
            Capability.PLAN_GENERATION: self.plan_providers,
            Capability.IMAGE_LOOKUP: self.image_providers,
            Capability.SPEECH_SYNTHESIS: self.speech_providers,
            Capability.MOTIVATION_QUOTE: self.quote_providers,
        }[capability]
        return parse_provider_order(raw)

    def credentials(self) -> dict[str, bool]:
        """Provider id → whether its credential is present."""
        present = {
            ProviderId.GEMINI: self.gemini_api_key,
            ProviderId.OPENAI: self.openai_api_key,
            ProviderId.OPENAI_IMAGES: self.openai_api_key,
            ProviderId.REPLICATE: self.replicate_api_key,
            ProviderId.ELEVENLABS: self.elevenlabs_api_key,
        }
        return {pid.value: bool(key.strip()) for pid, key in present.items()}

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("placeholder_image_template")
    @classmethod
    def _validate_placeholder(cls, v: str) -> str:
        if "{item}" not in v:
            raise ValueError("placeholder_image_template must contain '{item}'")
        return v

    @model_validator(mode="after")
    def _validate_chains(self) -> Settings:
        """Reject provider ids a capability cannot build an adapter for."""
        for capability, supported in SUPPORTED_PROVIDERS.items():
            unknown = [p for p in self.provider_order(capability) if p not in supported]
            if unknown:
                raise ValueError(
                    f"Unsupported provider(s) for {capability.value}: {', '.join(unknown)} "
                    f"(expected any of {', '.join(sorted(supported))})"
                )
        return self


def get_settings(**overrides: Any) -> Settings:
    """Factory that allows test-time overrides."""
    return Settings(**overrides)
