"""Response validators — raw provider payload → canonical result.

Every validator is pure and all-or-nothing: it either returns a fully built
canonical model or raises ``InvalidShapeError``.  The orchestrator treats
that error exactly like a transport failure and moves on to the next
provider.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import pydantic

from fitcoach.domain.exceptions import InvalidShapeError
from fitcoach.domain.results import FitnessPlan, ImageResult, QuoteResult, SpeechResult

QUOTE_MAX_CHARS = 200
_QUOTE_CHARS = "'\""


# ═══════════════════════════════════════════════════════════════
#  JSON extraction from free-form text
# ═══════════════════════════════════════════════════════════════
def find_json_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` span in *text*, or None.

    Braces inside JSON string literals (including escaped quotes) do not
    count towards the balance, so prose, markdown fences and trailing
    chatter around the object are ignored.
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for idx in range(start, len(text)):
        ch = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : idx + 1]
    return None


def extract_json_object(text: str) -> dict[str, Any]:
    """Locate the first balanced JSON object in *text* and decode it."""
    if not isinstance(text, str):
        raise InvalidShapeError(f"Expected text, got {type(text).__name__}")
    span = find_json_object(text)
    if span is None:
        raise InvalidShapeError("No JSON object found in provider response")
    try:
        decoded = json.loads(span)
    except json.JSONDecodeError as exc:
        raise InvalidShapeError(f"Unparsable JSON object: {exc.msg}") from exc
    if not isinstance(decoded, dict):
        raise InvalidShapeError("Decoded JSON is not an object")
    return decoded


def _build(model: type[pydantic.BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise InvalidShapeError(
            f"{model.__name__} failed validation on: {', '.join(fields) or 'root'}"
        ) from exc


# ═══════════════════════════════════════════════════════════════
#  Per-capability validators
# ═══════════════════════════════════════════════════════════════
def validate_plan(raw: Any, request: Mapping[str, Any]) -> FitnessPlan:
    """Free-form text with an embedded plan object → ``FitnessPlan``.

    ``workoutPlan``, ``dietPlan`` and ``tips`` must all be present and
    non-empty; a parsed but hollow plan is rejected like a malformed one.
    """
    data = extract_json_object(raw)
    missing = [key for key in ("workoutPlan", "dietPlan", "tips") if not data.get(key)]
    if missing:
        raise InvalidShapeError(f"Plan is missing or has empty sections: {', '.join(missing)}")
    return _build(FitnessPlan, data)


def validate_image(raw: Any, request: Mapping[str, Any]) -> ImageResult:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidShapeError("Image provider returned no URL")
    url = raw.strip()
    if not url.startswith(("http://", "https://", "data:")):
        raise InvalidShapeError(f"Image provider returned a non-URL value: {url[:40]!r}")
    return _build(ImageResult, {"imageUrl": url})


def validate_speech(raw: Any, request: Mapping[str, Any]) -> SpeechResult:
    if not isinstance(raw, (bytes, bytearray)) or not raw:
        raise InvalidShapeError("Speech provider returned an empty audio body")
    return _build(SpeechResult, {"audioBytes": bytes(raw)})


def clean_quote(text: str, max_chars: int = QUOTE_MAX_CHARS) -> str:
    """Strip quote characters and surrounding whitespace, then truncate."""
    stripped = "".join(ch for ch in text if ch not in _QUOTE_CHARS).strip()
    return stripped[:max_chars].strip()


def _quote_from_object(raw: str) -> str | None:
    """The ``quote`` string of an embedded JSON object, if there is one."""
    if find_json_object(raw) is None:
        return None
    try:
        data = extract_json_object(raw)
    except InvalidShapeError:
        return None
    quote = data.get("quote")
    return quote if isinstance(quote, str) else None


def validate_quote(raw: Any, request: Mapping[str, Any]) -> QuoteResult:
    """Free-form text → ``QuoteResult``.

    A ``{"quote": "..."}`` object embedded in the text wins when present;
    otherwise the whole text is the quote.
    """
    if not isinstance(raw, str):
        raise InvalidShapeError(f"Expected text, got {type(raw).__name__}")

    text = _quote_from_object(raw) or raw

    max_chars = int(request.get("max_chars", QUOTE_MAX_CHARS))
    quote = clean_quote(text, max_chars)
    if not quote:
        raise InvalidShapeError("Quote is empty after cleanup")
    return _build(QuoteResult, {"quote": quote})
