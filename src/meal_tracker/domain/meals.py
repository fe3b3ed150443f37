"""Domain models for meal logging."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from meal_tracker.domain.nutrition import NutritionVector

MEAL_NAME_MAX_LENGTH = 200

Confidence = Literal["high", "medium", "low"]


class MealType(StrEnum):
    """Meal slot a logged meal belongs to."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


class ServingMetadata(BaseModel):
    """Serving-size details recorded for AI-assisted meals."""

    factor: float = Field(gt=0)
    estimated_serving: str | None = None
    unit: str | None = None
    confidence: Confidence | None = None


class MealDraft(BaseModel):
    """Validated input for a new meal."""

    name: str = Field(min_length=1, max_length=MEAL_NAME_MAX_LENGTH)
    calories: float = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)
    fiber_g: float = Field(default=0.0, ge=0)
    meal_type: MealType
    logged_at: datetime | None = None
    image_url: str | None = None
    serving: ServingMetadata | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("name must not be blank")
        return stripped

    @property
    def nutrition(self) -> NutritionVector:
        """Return the draft's nutrient vector."""
        return NutritionVector(
            calories=self.calories,
            protein_g=self.protein_g,
            carbs_g=self.carbs_g,
            fat_g=self.fat_g,
            fiber_g=self.fiber_g,
        )


class MealPatch(BaseModel):
    """Partial update for an existing meal; unset fields are left untouched."""

    name: str | None = Field(
        default=None, min_length=1, max_length=MEAL_NAME_MAX_LENGTH
    )
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    meal_type: MealType | None = None
    logged_at: datetime | None = None
    image_url: str | None = None
    serving: ServingMetadata | None = None

    @field_validator(
        "name",
        "calories",
        "protein_g",
        "carbs_g",
        "fat_g",
        "fiber_g",
        "meal_type",
        "logged_at",
    )
    @classmethod
    def _reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("field may not be null")
        return value

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller set."""
        return self.model_dump(exclude_unset=True)


@dataclass(frozen=True)
class Meal:
    """A logged meal."""

    id: UUID
    user_id: UUID
    name: str
    nutrition: NutritionVector
    meal_type: MealType
    logged_at: datetime
    image_url: str | None = None
    serving: ServingMetadata | None = None
