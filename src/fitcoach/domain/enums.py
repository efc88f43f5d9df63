"""Domain enumerations for the coaching backend."""

from __future__ import annotations

import enum


class Capability(str, enum.Enum):
    """Kind of generation task, each with its own provider chain."""

    PLAN_GENERATION = "plan_generation"
    IMAGE_LOOKUP = "image_lookup"
    SPEECH_SYNTHESIS = "speech_synthesis"
    MOTIVATION_QUOTE = "motivation_quote"


class FailureReason(str, enum.Enum):
    """Why a single provider attempt did not produce a canonical result."""

    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport_error"
    INVALID_SHAPE = "invalid_shape"
    CREDENTIAL_MISSING = "credential_missing"


class OutcomeStatus(str, enum.Enum):
    """Terminal state of one ``obtain`` call.

    Pending → Attempting(provider_i)* → SUCCEEDED | DEGRADED | UNAVAILABLE
    """

    SUCCEEDED = "succeeded"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


class ImageKind(str, enum.Enum):
    EXERCISE = "exercise"
    MEAL = "meal"


class ProviderId(str, enum.Enum):
    """Provider identifiers accepted in chain configuration."""

    GEMINI = "gemini"
    OPENAI = "openai"
    OPENAI_IMAGES = "openai_images"
    REPLICATE = "replicate"
    ELEVENLABS = "elevenlabs"
