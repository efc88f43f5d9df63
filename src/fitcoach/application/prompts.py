"""Prompt construction for each generation capability."""

from __future__ import annotations

from fitcoach.domain.enums import ImageKind
from fitcoach.domain.exceptions import ValidationError

PLAN_SYSTEM = "You are a fitness expert. Respond ONLY with valid JSON, no extra text or markdown."

PLAN_RESPONSE_FORMAT = """{
  "workoutPlan": [
    {"day": "Monday", "exercises": [{"name": "Exercise Name", "sets": "3", "reps": "12", "rest": "60 seconds"}]},
    {"day": "Tuesday", "exercises": [{"name": "Exercise Name", "sets": "4", "reps": "10", "rest": "90 seconds"}]},
    {"day": "Wednesday", "exercises": [{"name": "Exercise Name", "sets": "3", "reps": "15", "rest": "45 seconds"}]},
    {"day": "Thursday", "exercises": [{"name": "Exercise Name", "sets": "3", "reps": "12", "rest": "60 seconds"}]},
    {"day": "Friday", "exercises": [{"name": "Exercise Name", "sets": "4", "reps": "8", "rest": "90 seconds"}]},
    {"day": "Saturday", "exercises": [{"name": "Exercise Name", "sets": "3", "reps": "12", "rest": "75 seconds"}]},
    {"day": "Sunday", "exercises": [{"name": "Rest or Light Stretching", "sets": "1", "reps": "30 min", "rest": "N/A"}]}
  ],
  "dietPlan": {
    "breakfast": [{"name": "Food Item", "calories": 400, "protein": 25}],
    "lunch": [{"name": "Food Item", "calories": 550, "protein": 35}],
    "dinner": [{"name": "Food Item", "calories": 500, "protein": 30}],
    "snacks": [{"name": "Food Item", "calories": 150, "protein": 10}]
  },
  "tips": ["Tip 1", "Tip 2", "Tip 3", "Tip 4", "Tip 5"]
}"""

MOTIVATION_PROMPT = (
    "Generate a short, powerful, and inspiring fitness motivation quote in exactly one "
    "sentence (max 15 words). Return ONLY the quote, nothing else, no quotes around it."
)


def compute_bmi(height_cm: float, weight_kg: float) -> float:
    """Body-mass index rounded to two decimals."""
    if height_cm <= 0 or weight_kg <= 0:
        raise ValidationError("Height and weight must be positive")
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def build_plan_prompt(
    *,
    name: str,
    age: int,
    gender: str | None,
    height: float,
    weight: float,
    goal: str | None,
    fitness_level: str | None,
    location: str | None,
    diet: str | None,
    medical_history: str | None,
    stress_level: str | None,
) -> str:
    bmi = compute_bmi(height, weight)
    return f"""You are an expert fitness coach and nutritionist. Create a comprehensive, personalized fitness and diet plan STRICTLY in valid JSON format. Return ONLY the JSON with no markdown, no extra text, no code blocks.

PERSONAL INFORMATION:
- Name: {name}
- Age: {age}
- Gender: {gender or 'Not specified'}
- Height: {height:g}cm
- Weight: {weight:g}kg
- BMI: {bmi:.2f}
- Fitness Goal: {goal or 'General fitness'}
- Current Fitness Level: {fitness_level or 'Not specified'}
- Workout Location: {location or 'Not specified'}
- Dietary Preference: {diet or 'No preference'}
- Medical History: {medical_history or 'None'}
- Stress Level: {stress_level or 'Not specified'}

RESPONSE FORMAT - RETURN ONLY THIS JSON (no extra text):
{PLAN_RESPONSE_FORMAT}"""


def build_image_prompt(item_name: str, kind: str) -> str:
    if kind == ImageKind.EXERCISE.value:
        return (
            f"Professional gym demonstration of {item_name} exercise, correct form, "
            "athlete in action, high quality, realistic, 4K resolution, well-lit"
        )
    return (
        f"Delicious and appetizing {item_name}, professional food photography, well-plated, "
        "good lighting, magazine quality, high resolution"
    )
