"""Serving-size scaling for AI-estimated nutrition."""

import math

from meal_tracker.domain.meals import (
    MEAL_NAME_MAX_LENGTH,
    MealDraft,
    MealType,
    ServingMetadata,
)
from meal_tracker.domain.nutrition import NutritionVector
from meal_tracker.domain.vision import NutritionEstimate
from meal_tracker.errors import InvalidInput

BASE_FACTOR = 1.0
MIN_SLIDER_FACTOR = 0.25
MAX_SLIDER_FACTOR = 3.0
SLIDER_STEP = 0.25

_PORTION_LABELS = (
    (0.5, "Small portion"),
    (0.75, "Half portion"),
    (1.25, "Standard portion"),
    (1.75, "Large portion"),
)
_LARGEST_PORTION_LABEL = "Extra large portion"


def scale_nutrition(base: NutritionVector, factor: float) -> NutritionVector:
    """Scale a vector captured at factor 1.0 to ``factor``.

    Values keep full precision; any positive factor is accepted as-is.
    """
    _validate_factor(factor)
    return base.scaled(factor / BASE_FACTOR)


def round_for_display(vector: NutritionVector) -> NutritionVector:
    """Round every component to one decimal place."""
    return NutritionVector(
        calories=round(vector.calories, 1),
        protein_g=round(vector.protein_g, 1),
        carbs_g=round(vector.carbs_g, 1),
        fat_g=round(vector.fat_g, 1),
        fiber_g=round(vector.fiber_g, 1),
    )


def portion_label(factor: float) -> str:
    """Describe a serving factor in words."""
    for upper_bound, label in _PORTION_LABELS:
        if factor <= upper_bound:
            return label
    return _LARGEST_PORTION_LABEL


def draft_from_estimate(
    estimate: NutritionEstimate,
    factor: float,
    meal_type: MealType,
    image_url: str | None = None,
) -> MealDraft:
    """Build a meal draft from a recognition result at the chosen factor.

    The estimate's raw values are the 1.0 baseline, whatever serving size
    the model itself reported.
    """
    scaled = scale_nutrition(estimate.to_vector(), factor)
    return MealDraft(
        name=estimate.name[:MEAL_NAME_MAX_LENGTH],
        calories=scaled.calories,
        protein_g=scaled.protein_g,
        carbs_g=scaled.carbs_g,
        fat_g=scaled.fat_g,
        fiber_g=scaled.fiber_g,
        meal_type=meal_type,
        image_url=image_url,
        serving=ServingMetadata(
            factor=factor,
            estimated_serving=f"{estimate.serving_size:g} {estimate.serving_unit}",
            unit=estimate.serving_unit,
            confidence=estimate.confidence,
        ),
    )


def _validate_factor(factor: float) -> None:
    if not math.isfinite(factor) or factor <= 0:
        raise InvalidInput(f"Serving factor must be a positive number, got {factor}")
