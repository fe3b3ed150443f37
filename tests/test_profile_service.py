"""Tests for profile service."""

import pytest

from meal_tracker.domain.nutrition import MacroTargets
from meal_tracker.domain.profiles import ActivityLevel
from meal_tracker.errors import InvalidInput, NotFound
from meal_tracker.services.profiles import ProfileService
from tests.conftest import InMemoryProfileRepository


def test_get_profile_before_onboarding_raises(user_id) -> None:
    service = ProfileService(InMemoryProfileRepository())

    with pytest.raises(NotFound):
        service.get_profile(user_id)


def test_save_profile_and_targets(user_id) -> None:
    service = ProfileService(InMemoryProfileRepository())

    profile = service.save_profile(
        user_id,
        {
            "daily_calorie_goal": 2000,
            "weight_kg": 70,
            "activity_level": "moderately_active",
            "timezone": "Asia/Kolkata",
        },
    )

    assert profile.activity_level is ActivityLevel.MODERATELY_ACTIVE
    assert service.get_profile(user_id) == profile
    assert service.get_targets(user_id) == MacroTargets(
        protein_g=112, carbs_g=230, fat_g=70
    )


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"daily_calorie_goal": 0},
        {"daily_calorie_goal": 2000, "weight_kg": -3},
        {"daily_calorie_goal": 2000, "activity_level": "couch"},
        {"daily_calorie_goal": 2000, "timezone": "Mars/Olympus_Mons"},
    ],
)
def test_save_profile_rejects_invalid_input(
    user_id, payload: dict[str, object]
) -> None:
    repository = InMemoryProfileRepository()
    service = ProfileService(repository)

    with pytest.raises(InvalidInput):
        service.save_profile(user_id, payload)
    assert repository.profiles == {}


def test_get_timezone_falls_back_to_default(user_id) -> None:
    service = ProfileService(
        InMemoryProfileRepository(), default_timezone="Asia/Kolkata"
    )

    assert service.get_timezone(user_id) == "Asia/Kolkata"

    service.save_profile(
        user_id, {"daily_calorie_goal": 1800, "timezone": "Europe/Paris"}
    )

    assert service.get_timezone(user_id) == "Europe/Paris"
