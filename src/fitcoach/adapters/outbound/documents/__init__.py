"""PDF export of a generated fitness plan (reportlab).

Layout: A4 with 40pt margins; title and date, then the workout plan, the
diet plan on a new page, the tips on a new page and a closing advice page.
"""

from __future__ import annotations

import io
from datetime import date
from typing import Any
from xml.sax.saxutils import escape

import structlog
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer

from fitcoach.domain.results import FitnessPlan
from fitcoach.ports.outbound import PlanRendererPort

logger = structlog.get_logger(__name__)

TITLE = "Your Personalized Fitness Plan"
DISCLAIMER = (
    "Remember to consult with a fitness professional before starting any new exercise program."
)
MARGIN_PT = 40

# ── Styles ───────────────────────────────────────────────────
_TITLE = ParagraphStyle("PlanTitle", fontName="Helvetica-Bold", fontSize=24, leading=30, alignment=TA_CENTER)
_SUBTITLE = ParagraphStyle("PlanSubtitle", fontName="Helvetica", fontSize=10, leading=14, alignment=TA_CENTER)
_SECTION = ParagraphStyle("PlanSection", fontName="Helvetica-Bold", fontSize=18, leading=24, spaceAfter=10)
_DAY = ParagraphStyle(
    "PlanDay", fontName="Helvetica-Bold", fontSize=12, leading=16, textColor=colors.HexColor("#667eea")
)
_MEAL = ParagraphStyle(
    "PlanMeal", fontName="Helvetica-Bold", fontSize=12, leading=16, textColor=colors.HexColor("#42b883")
)
_ITEM = ParagraphStyle("PlanItem", fontName="Helvetica", fontSize=10, leading=14, leftIndent=20)
_TIP = ParagraphStyle("PlanTip", fontName="Helvetica", fontSize=10, leading=14, spaceAfter=6)


def _text(value: Any) -> str:
    return escape("-" if value is None or value == "" else str(value))


class PlanPdfRenderer(PlanRendererPort):
    media_type = "application/pdf"
    extension = "pdf"

    def render(self, plan: FitnessPlan, *, generated_on: date | None = None) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=MARGIN_PT,
            rightMargin=MARGIN_PT,
            topMargin=MARGIN_PT,
            bottomMargin=MARGIN_PT,
            title=TITLE,
        )
        doc.build(self._story(plan, generated_on or date.today()))
        pdf = buffer.getvalue()
        logger.info("plan_pdf_rendered", pages=doc.page, bytes=len(pdf))
        return pdf

    def _story(self, plan: FitnessPlan, generated_on: date) -> list[Any]:
        story: list[Any] = [
            Paragraph(TITLE, _TITLE),
            Spacer(1, 6),
            Paragraph(f"Generated on: {generated_on.isoformat()}", _SUBTITLE),
            Spacer(1, 20),
            Paragraph("<u>Workout Plan</u>", _SECTION),
        ]
        for day in plan.workout_plan:
            story.append(Paragraph(_text(day.day), _DAY))
            for ex in day.exercises:
                story.append(
                    Paragraph(
                        f"• {_text(ex.name)}: {_text(ex.sets)} sets × {_text(ex.reps)} reps "
                        f"(Rest: {_text(ex.rest)})",
                        _ITEM,
                    )
                )
            story.append(Spacer(1, 8))

        story += [PageBreak(), Paragraph("<u>Diet Plan</u>", _SECTION)]
        for meal, items in plan.diet_plan.items():
            story.append(Paragraph(_text(meal[:1].upper() + meal[1:]), _MEAL))
            for item in items:
                story.append(
                    Paragraph(
                        f"• {_text(item.name)}: {_text(item.calories)} cal, "
                        f"{_text(item.protein)}g protein",
                        _ITEM,
                    )
                )
            story.append(Spacer(1, 8))

        story += [PageBreak(), Paragraph("<u>Tips &amp; Recommendations</u>", _SECTION)]
        story += [Paragraph(f"{i}. {_text(tip)}", _TIP) for i, tip in enumerate(plan.tips, start=1)]

        story += [PageBreak(), Paragraph(DISCLAIMER, _SUBTITLE)]
        return story
