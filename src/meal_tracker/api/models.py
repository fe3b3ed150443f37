"""Pydantic request models and response serializers for the HTTP API."""

from pydantic import BaseModel, Field

from meal_tracker.domain.meals import Meal, MealType
from meal_tracker.domain.nutrition import MacroTargets, NutritionVector
from meal_tracker.domain.profiles import Profile
from meal_tracker.domain.stats import HistoryDay, WeeklyEntry
from meal_tracker.domain.vision import NutritionEstimate


class AnalyzeFoodRequest(BaseModel):
    """Image to analyze, as a data URL."""

    image: str


class NutritionInput(BaseModel):
    """Nutrient vector supplied by the client."""

    calories: float = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)

    def to_vector(self) -> NutritionVector:
        """Return the domain vector."""
        return NutritionVector(**self.model_dump())


class ScaleRequest(BaseModel):
    """Base vector at factor 1.0 and the factor to scale it to."""

    base: NutritionInput
    factor: float


class LogEstimateRequest(BaseModel):
    """Recognition result the user confirmed, with the chosen serving factor."""

    estimate: NutritionEstimate
    factor: float = 1.0
    meal_type: MealType
    image_url: str | None = None


def vector_payload(vector: NutritionVector) -> dict[str, float]:
    """Serialize a nutrient vector."""
    return vector.as_dict()


def meal_payload(meal: Meal) -> dict[str, object]:
    """Serialize a meal."""
    return {
        "id": str(meal.id),
        "name": meal.name,
        **vector_payload(meal.nutrition),
        "meal_type": meal.meal_type.value,
        "logged_at": meal.logged_at.isoformat(),
        "image_url": meal.image_url,
        "serving": meal.serving.model_dump() if meal.serving else None,
    }


def profile_payload(profile: Profile) -> dict[str, object]:
    """Serialize a profile."""
    return {
        "daily_calorie_goal": profile.daily_calorie_goal,
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "age": profile.age,
        "gender": profile.gender,
        "activity_level": (
            profile.activity_level.value if profile.activity_level else None
        ),
        "username": profile.username,
        "timezone": profile.timezone,
    }


def targets_payload(targets: MacroTargets) -> dict[str, int]:
    """Serialize macro targets."""
    return {
        "protein_g": targets.protein_g,
        "carbs_g": targets.carbs_g,
        "fat_g": targets.fat_g,
    }


def weekly_entry_payload(entry: WeeklyEntry) -> dict[str, object]:
    """Serialize one day of the weekly series."""
    return {
        "date": entry.day.isoformat(),
        "label": entry.label,
        **vector_payload(entry.totals),
    }


def history_day_payload(day: HistoryDay) -> dict[str, object]:
    """Serialize a history day with its meals."""
    return {
        "date": day.day.isoformat(),
        "label": day.label,
        "totals": vector_payload(day.totals),
        "meal_count": len(day.meals),
        "meals": [meal_payload(meal) for meal in day.meals],
    }
