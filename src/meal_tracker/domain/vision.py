"""Models for food recognition results."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from meal_tracker.domain.meals import Confidence
from meal_tracker.domain.nutrition import NutritionVector

_DEFAULTED_FIELDS = (
    "protein",
    "carbs",
    "fat",
    "fiber",
    "serving_size",
    "serving_unit",
    "confidence",
)


class NutritionEstimate(BaseModel):
    """Nutrition estimate for a photographed dish."""

    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    serving_size: float = Field(default=1.0, gt=0)
    serving_unit: str = "servings"
    confidence: Confidence = "low"

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # A null optional field takes its default.
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if not (key in _DEFAULTED_FIELDS and value is None)
        }

    def to_vector(self) -> NutritionVector:
        """Return the estimate as a nutrient vector."""
        return NutritionVector(
            calories=self.calories,
            protein_g=self.protein,
            carbs_g=self.carbs,
            fat_g=self.fat,
            fiber_g=self.fiber,
        )
