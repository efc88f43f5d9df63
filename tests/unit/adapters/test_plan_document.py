"""Unit tests for the PDF plan renderer."""

from __future__ import annotations

import re
from datetime import date

import pytest

from conftest import VALID_PLAN
from fitcoach.adapters.outbound.documents import PlanPdfRenderer
from fitcoach.domain.results import FitnessPlan

_PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?![a-zA-Z])")


@pytest.fixture
def renderer() -> PlanPdfRenderer:
    return PlanPdfRenderer()


class TestPlanPdfRenderer:
    def test_produces_complete_pdf(self, renderer) -> None:
        pdf = renderer.render(FitnessPlan.model_validate(VALID_PLAN), generated_on=date(2026, 1, 5))
        assert pdf.startswith(b"%PDF-")
        assert b"%%EOF" in pdf[-32:]

    def test_sections_on_separate_pages(self, renderer) -> None:
        pdf = renderer.render(FitnessPlan.model_validate(VALID_PLAN))
        # workout, diet, tips, closing advice
        assert len(_PAGE_OBJECT.findall(pdf)) == 4

    def test_markup_and_missing_values_are_safe(self, renderer) -> None:
        plan = FitnessPlan.model_validate(
            {
                "workoutPlan": [{"day": "Mon <legs>", "exercises": [{"name": "Squat & press"}]}],
                "dietPlan": {"snack": [{"name": "Nuts", "calories": None}]},
                "tips": ["Use <b>good</b> form"],
            }
        )
        assert renderer.render(plan).startswith(b"%PDF-")

    def test_media_type(self, renderer) -> None:
        assert renderer.media_type == "application/pdf"
        assert renderer.extension == "pdf"
