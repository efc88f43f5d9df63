"""Degraded results — safe substitutes used only after a whole chain fails.

Suppliers perform no I/O and cannot fail.  Plan generation and speech
synthesis deliberately have none: a made-up plan or garbled audio is worse
than an explicit "unavailable".
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

from fitcoach.domain.results import ImageResult, QuoteResult

PLACEHOLDER_IMAGE_TEMPLATE = "https://via.placeholder.com/512x512?text={item}"

FALLBACK_QUOTES: tuple[str, ...] = (
    "The only bad workout is the one that didn't happen.",
    "Your body can stand almost anything. Your mind you have to convince.",
    "The pain you feel today will be the strength you feel tomorrow.",
    "Success starts with self-discipline.",
    "Make yourself proud.",
    "Your transformation begins today.",
    "Train like a champion.",
    "Every rep counts toward your goals.",
    "Consistency is the key to success.",
    "Push harder than yesterday.",
)

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def placeholder_image_url(item_name: str, template: str = PLACEHOLDER_IMAGE_TEMPLATE) -> str:
    return template.format(item=quote(item_name or "Image", safe=_URI_COMPONENT_SAFE))


def placeholder_image(
    template: str = PLACEHOLDER_IMAGE_TEMPLATE,
) -> Callable[[Mapping[str, Any]], ImageResult]:
    """Build the image supplier: a placeholder keyed by the request's item name."""

    def _supply(request: Mapping[str, Any]) -> ImageResult:
        item = str(request.get("item_name") or "Image")
        return ImageResult(image_url=placeholder_image_url(item, template))

    return _supply


def random_quote(
    pool: tuple[str, ...] = FALLBACK_QUOTES,
    *,
    rng: random.Random | None = None,
) -> Callable[[Mapping[str, Any]], QuoteResult]:
    """Build the quote supplier: one uniform pick from a fixed literal pool."""
    if not pool:
        raise ValueError("Fallback quote pool must not be empty")
    chooser = rng or random.Random()

    def _supply(request: Mapping[str, Any]) -> QuoteResult:
        return QuoteResult(quote=chooser.choice(pool))

    return _supply
