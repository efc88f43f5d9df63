"""Canonical results — the one shape each capability hands back to callers.

Whichever provider produced the data (or the degraded supplier), the value
leaving the orchestrator is one of these models.  Construction is the
validation step: a model either builds completely or raises.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Canonical(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ═══════════════════════════════════════════════════════════════
#  Plan generation
# ═══════════════════════════════════════════════════════════════
class Exercise(_Canonical):
    model_config = ConfigDict(populate_by_name=True, frozen=True, coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1)
    sets: str = ""
    reps: str = ""
    rest: str = ""


class DayPlan(_Canonical):
    day: str = Field(..., min_length=1)
    exercises: list[Exercise] = Field(default_factory=list)


class FoodItem(_Canonical):
    name: str = Field(..., min_length=1)
    # int before float so whole numbers round-trip unchanged
    calories: int | float | str | None = None
    protein: int | float | str | None = None


class FitnessPlan(_Canonical):
    """Weekly workout schedule, meals keyed by meal name, and tips.

    All three sections must be present and non-empty.
    """

    workout_plan: list[DayPlan] = Field(..., alias="workoutPlan", min_length=1)
    diet_plan: dict[str, list[FoodItem]] = Field(..., alias="dietPlan", min_length=1)
    tips: list[str] = Field(..., min_length=1)


# ═══════════════════════════════════════════════════════════════
#  Image / speech / quote
# ═══════════════════════════════════════════════════════════════
class ImageResult(_Canonical):
    image_url: str = Field(..., alias="imageUrl", min_length=1)


class SpeechResult(_Canonical):
    audio_bytes: bytes = Field(..., alias="audioBytes", min_length=1)
    media_type: str = "audio/mpeg"


class QuoteResult(_Canonical):
    quote: str = Field(..., min_length=1, max_length=200)
