"""Tests for meal service."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from meal_tracker.domain.meals import MealType
from meal_tracker.domain.vision import NutritionEstimate
from meal_tracker.errors import InvalidInput, NotFound
from meal_tracker.services.meals import MealService
from tests.conftest import FIXED_NOW, InMemoryMealRepository, make_meal


def _service() -> tuple[MealService, InMemoryMealRepository]:
    repository = InMemoryMealRepository()
    return MealService(repository, clock=lambda: FIXED_NOW), repository


def test_log_meal_stamps_current_time(user_id) -> None:
    service, repository = _service()

    meal = service.log_meal(
        user_id,
        {
            "name": "  Aloo Paratha ",
            "calories": 300,
            "protein_g": 7,
            "meal_type": "breakfast",
        },
    )

    assert meal.name == "Aloo Paratha"
    assert meal.logged_at == FIXED_NOW
    assert meal.meal_type is MealType.BREAKFAST
    assert meal.nutrition.carbs_g == 0
    assert repository.meals[meal.id] == meal


def test_log_meal_keeps_explicit_time(user_id) -> None:
    service, _ = _service()
    logged_at = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)

    meal = service.log_meal(
        user_id,
        {
            "name": "Upma",
            "calories": 250,
            "meal_type": "breakfast",
            "logged_at": logged_at,
        },
    )

    assert meal.logged_at == logged_at


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "calories": 100, "meal_type": "lunch"},
        {"name": "   ", "calories": 100, "meal_type": "lunch"},
        {"name": "x" * 201, "calories": 100, "meal_type": "lunch"},
        {"name": "Dal", "calories": -1, "meal_type": "lunch"},
        {"name": "Dal", "meal_type": "lunch"},
        {"name": "Dal", "calories": 100, "meal_type": "brunch"},
        {"name": "Dal", "calories": 100, "protein_g": -2, "meal_type": "lunch"},
    ],
)
def test_log_meal_rejects_invalid_input(user_id, payload: dict[str, object]) -> None:
    service, repository = _service()

    with pytest.raises(InvalidInput):
        service.log_meal(user_id, payload)
    assert repository.meals == {}


def test_log_estimate_scales_by_factor(user_id) -> None:
    service, _ = _service()
    estimate = NutritionEstimate(
        name="Biryani", calories=600, protein=25, carbs=70, fat=22, fiber=3
    )

    meal = service.log_estimate(user_id, estimate, 0.5, MealType.DINNER)

    assert meal.nutrition.calories == 300
    assert meal.nutrition.protein_g == 12.5
    assert meal.serving is not None
    assert meal.serving.factor == 0.5
    assert meal.logged_at == FIXED_NOW


def test_log_estimate_rejects_bad_factor(user_id) -> None:
    service, _ = _service()
    estimate = NutritionEstimate(name="Biryani", calories=600)

    with pytest.raises(InvalidInput):
        service.log_estimate(user_id, estimate, 0, MealType.DINNER)


def test_update_meal_applies_partial_changes(user_id) -> None:
    service, repository = _service()
    meal = repository.add(make_meal(user_id, FIXED_NOW, calories=500, protein_g=20))

    updated = service.update_meal(
        user_id, meal.id, {"calories": 550, "name": "Dal fry"}
    )

    assert updated.nutrition.calories == 550
    assert updated.nutrition.protein_g == 20
    assert updated.name == "Dal fry"


def test_update_meal_rejects_empty_and_null_patches(user_id) -> None:
    service, repository = _service()
    meal = repository.add(make_meal(user_id, FIXED_NOW))

    with pytest.raises(InvalidInput, match="No fields to update"):
        service.update_meal(user_id, meal.id, {})
    with pytest.raises(InvalidInput):
        service.update_meal(user_id, meal.id, {"calories": None})


def test_update_meal_requires_ownership(user_id) -> None:
    service, repository = _service()
    meal = repository.add(make_meal(uuid4(), FIXED_NOW))

    with pytest.raises(NotFound):
        service.update_meal(user_id, meal.id, {"calories": 1})
    with pytest.raises(NotFound):
        service.delete_meal(user_id, meal.id)
    assert meal.id in repository.meals


def test_delete_and_get_meal(user_id) -> None:
    service, repository = _service()
    meal = repository.add(make_meal(user_id, FIXED_NOW))

    assert service.get_meal(user_id, meal.id) == meal
    service.delete_meal(user_id, meal.id)

    assert repository.meals == {}
    with pytest.raises(NotFound):
        service.get_meal(user_id, meal.id)
