"""Unit tests for provider response validators and degraded suppliers."""

from __future__ import annotations

import json
import random

import pytest

from conftest import VALID_PLAN
from fitcoach.domain.exceptions import InvalidShapeError
from fitcoach.shared.providers.degraded import (
    FALLBACK_QUOTES,
    placeholder_image,
    placeholder_image_url,
    random_quote,
)
from fitcoach.shared.providers.validators import (
    clean_quote,
    extract_json_object,
    find_json_object,
    validate_image,
    validate_plan,
    validate_quote,
    validate_speech,
)


# ═══════════════════════════════════════════════════════════════
#  JSON extraction
# ═══════════════════════════════════════════════════════════════
class TestFindJsonObject:
    def test_plain_object(self) -> None:
        assert find_json_object('{"a": 1}') == '{"a": 1}'

    def test_object_inside_prose(self) -> None:
        text = 'Here you go: {"a": {"b": 2}} hope it helps {"c": 3}'
        assert find_json_object(text) == '{"a": {"b": 2}}'

    def test_braces_inside_strings_ignored(self) -> None:
        text = 'x {"tip": "use {braces} \\"carefully\\"", "n": 1} y'
        span = find_json_object(text)
        assert json.loads(span) == {"tip": 'use {braces} "carefully"', "n": 1}

    def test_no_object(self) -> None:
        assert find_json_object("no json here") is None

    def test_unbalanced(self) -> None:
        assert find_json_object('{"a": {"b": 1}') is None


class TestExtractJsonObject:
    def test_markdown_fence(self) -> None:
        assert extract_json_object('```json\n{"k": "v"}\n```') == {"k": "v"}

    def test_rejects_non_text(self) -> None:
        with pytest.raises(InvalidShapeError, match="Expected text"):
            extract_json_object(b"{}")  # type: ignore[arg-type]

    def test_rejects_broken_json(self) -> None:
        with pytest.raises(InvalidShapeError, match="Unparsable"):
            extract_json_object("{'single': 'quotes'}")

    def test_rejects_missing_object(self) -> None:
        with pytest.raises(InvalidShapeError, match="No JSON object"):
            extract_json_object("[1, 2, 3]")


# ═══════════════════════════════════════════════════════════════
#  Plan
# ═══════════════════════════════════════════════════════════════
class TestValidatePlan:
    def test_valid_plan(self) -> None:
        plan = validate_plan(json.dumps(VALID_PLAN), {})
        assert plan.workout_plan[0].day == "Monday"
        assert plan.diet_plan["breakfast"][0].calories == 400
        dumped = plan.model_dump(mode="json", by_alias=True)
        assert type(dumped["dietPlan"]["breakfast"][0]["calories"]) is int
        assert type(dumped["dietPlan"]["breakfast"][0]["protein"]) is int
        assert plan.model_dump(by_alias=True)["workoutPlan"][1]["exercises"][0]["reps"] == "10"

    @pytest.mark.parametrize("section", ["workoutPlan", "dietPlan", "tips"])
    def test_missing_section(self, section: str) -> None:
        data = {k: v for k, v in VALID_PLAN.items() if k != section}
        with pytest.raises(InvalidShapeError, match=section):
            validate_plan(json.dumps(data), {})

    @pytest.mark.parametrize("section,empty", [("workoutPlan", []), ("dietPlan", {}), ("tips", [])])
    def test_empty_section(self, section: str, empty: object) -> None:
        data = {**VALID_PLAN, section: empty}
        with pytest.raises(InvalidShapeError, match=section):
            validate_plan(json.dumps(data), {})

    def test_wrong_nested_type(self) -> None:
        data = {**VALID_PLAN, "workoutPlan": [{"day": "Monday", "exercises": "pushups"}]}
        with pytest.raises(InvalidShapeError, match="FitnessPlan failed validation"):
            validate_plan(json.dumps(data), {})


# ═══════════════════════════════════════════════════════════════
#  Image / speech
# ═══════════════════════════════════════════════════════════════
class TestValidateImage:
    def test_https_url(self) -> None:
        assert validate_image(" https://cdn/x.png ", {}).image_url == "https://cdn/x.png"

    def test_data_url(self) -> None:
        assert validate_image("data:image/png;base64,AAA", {}).image_url.startswith("data:")

    @pytest.mark.parametrize("raw", [None, "", "   ", "not a url", 42])
    def test_rejects(self, raw: object) -> None:
        with pytest.raises(InvalidShapeError):
            validate_image(raw, {})


class TestValidateSpeech:
    def test_bytes(self) -> None:
        result = validate_speech(b"\xff\xfb\x90", {})
        assert result.audio_bytes == b"\xff\xfb\x90"
        assert result.media_type == "audio/mpeg"

    @pytest.mark.parametrize("raw", [b"", None, "text"])
    def test_rejects(self, raw: object) -> None:
        with pytest.raises(InvalidShapeError):
            validate_speech(raw, {})


# ═══════════════════════════════════════════════════════════════
#  Quote
# ═══════════════════════════════════════════════════════════════
class TestValidateQuote:
    def test_strips_quote_characters(self) -> None:
        assert clean_quote("  \"Don't stop.\"  ") == "Dont stop."

    def test_truncates_to_limit(self) -> None:
        result = validate_quote("x" * 500, {})
        assert len(result.quote) == 200

    def test_request_limit_applies(self) -> None:
        assert validate_quote("abcdefghij", {"max_chars": 4}).quote == "abcd"

    def test_quote_object_preferred(self) -> None:
        raw = 'Here: {"quote": "Lift heavy, live light."}'
        assert validate_quote(raw, {}).quote == "Lift heavy, live light."

    def test_object_without_quote_key_is_plain_text(self) -> None:
        assert validate_quote('{"text": "hi"}', {}).quote == "{text: hi}"

    def test_braces_in_plain_quote(self) -> None:
        raw = "Lift heavy, {rest} well, repeat."
        assert validate_quote(raw, {}).quote == "Lift heavy, {rest} well, repeat."

    def test_non_string_quote_value_falls_back_to_text(self) -> None:
        assert validate_quote('{"quote": 7}', {}).quote == "{quote: 7}"

    def test_empty_after_cleanup(self) -> None:
        with pytest.raises(InvalidShapeError, match="empty"):
            validate_quote('""', {})


# ═══════════════════════════════════════════════════════════════
#  Degraded suppliers
# ═══════════════════════════════════════════════════════════════
class TestDegradedSuppliers:
    def test_placeholder_url(self) -> None:
        assert placeholder_image_url("Push-up") == "https://via.placeholder.com/512x512?text=Push-up"

    def test_placeholder_custom_template(self) -> None:
        supply = placeholder_image("https://img.local/{item}.png")
        assert supply({"item_name": "Bench press"}).image_url == "https://img.local/Bench%20press.png"

    def test_placeholder_without_item_name(self) -> None:
        assert placeholder_image()({}).image_url.endswith("text=Image")

    def test_random_quote_from_pool(self) -> None:
        supply = random_quote(rng=random.Random(1))
        picks = {supply({}).quote for _ in range(50)}
        assert picks <= set(FALLBACK_QUOTES)
        assert len(picks) > 1

    def test_pool_quotes_within_limit(self) -> None:
        assert all(0 < len(q) <= 200 for q in FALLBACK_QUOTES)

    def test_empty_pool_rejected(self) -> None:
        with pytest.raises(ValueError):
            random_quote(())
