"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from meal_tracker.config import Settings
from meal_tracker.containers import AppContainer
from meal_tracker.domain.meals import Meal, MealDraft, MealType, ServingMetadata
from meal_tracker.domain.nutrition import NutritionVector
from meal_tracker.domain.profiles import Profile, ProfileUpdate
from meal_tracker.services.meals import MealRepository, MealService
from meal_tracker.services.profiles import ProfileRepository, ProfileService
from meal_tracker.services.stats import StatsService
from meal_tracker.services.vision import FoodRecognitionClient, FoodRecognitionService

FIXED_NOW = datetime(2024, 3, 6, 12, 0, tzinfo=UTC)

API_TOKEN = "api-token"


def make_meal(  # noqa: PLR0913
    user_id: UUID,
    logged_at: datetime,
    calories: float = 500,
    protein_g: float = 20,
    carbs_g: float = 60,
    fat_g: float = 15,
    fiber_g: float = 5,
    name: str = "Dal rice",
    meal_type: MealType = MealType.LUNCH,
) -> Meal:
    return Meal(
        id=uuid4(),
        user_id=user_id,
        name=name,
        nutrition=NutritionVector(
            calories=calories,
            protein_g=protein_g,
            carbs_g=carbs_g,
            fat_g=fat_g,
            fiber_g=fiber_g,
        ),
        meal_type=meal_type,
        logged_at=logged_at,
    )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    meals: dict[UUID, Meal] = field(default_factory=dict)
    list_calls: list[tuple[UUID, datetime, datetime]] = field(default_factory=list)

    def add(self, meal: Meal) -> Meal:
        self.meals[meal.id] = meal
        return meal

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        self.list_calls.append((user_id, start, end))
        matches = [
            meal
            for meal in self.meals.values()
            if meal.user_id == user_id and start <= meal.logged_at < end
        ]
        return sorted(matches, key=lambda meal: meal.logged_at, reverse=True)

    def get_meal(self, meal_id: UUID) -> Meal | None:
        return self.meals.get(meal_id)

    def insert_meal(self, user_id: UUID, draft: MealDraft) -> Meal:
        assert draft.logged_at is not None
        meal = Meal(
            id=uuid4(),
            user_id=user_id,
            name=draft.name,
            nutrition=draft.nutrition,
            meal_type=draft.meal_type,
            logged_at=draft.logged_at,
            image_url=draft.image_url,
            serving=draft.serving,
        )
        return self.add(meal)

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> Meal | None:
        meal = self.meals.get(meal_id)
        if meal is None:
            return None
        nutrition = meal.nutrition.as_dict()
        for key in nutrition:
            if key in changes:
                nutrition[key] = float(changes[key])  # type: ignore[arg-type]
        serving = meal.serving
        if "serving" in changes:
            raw = changes["serving"]
            serving = ServingMetadata.model_validate(raw) if raw else None
        simple = {
            key: changes[key]
            for key in ("name", "logged_at", "image_url")
            if key in changes
        }
        updated = replace(
            meal,
            nutrition=NutritionVector(**nutrition),
            meal_type=MealType(changes.get("meal_type", meal.meal_type)),
            serving=serving,
            **simple,
        )
        self.meals[meal_id] = updated
        return updated

    def delete_meal(self, meal_id: UUID) -> None:
        self.meals.pop(meal_id, None)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, Profile] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> Profile | None:
        return self.profiles.get(user_id)

    def upsert_profile(self, user_id: UUID, update: ProfileUpdate) -> Profile:
        profile = Profile(user_id=user_id, **update.model_dump())
        self.profiles[user_id] = profile
        return profile


@dataclass
class FakeFoodRecognitionClient(FoodRecognitionClient):
    """Fake recognition client returning canned text or raising an error."""

    content: str = (
        '{"name": "Paneer Butter Masala", "calories": 450, "protein": 18, '
        '"carbs": 20, "fat": 32, "fiber": 3, "serving_size": 1, '
        '"serving_unit": "bowls", "confidence": "medium"}'
    )
    error: Exception | None = None
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, object]],
    ) -> str:
        self.calls.append(
            {"model": model, "temperature": temperature, "messages": messages}
        )
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token=API_TOKEN,
        vision_api_key="vision-key",
        environment="test",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def recognition_client() -> FakeFoodRecognitionClient:
    return FakeFoodRecognitionClient()


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    profile_repository: InMemoryProfileRepository,
    recognition_client: FakeFoodRecognitionClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        profile_service=ProfileService(profile_repository),
        meal_service=MealService(meal_repository, clock=lambda: FIXED_NOW),
        stats_service=StatsService(meal_repository, clock=lambda: FIXED_NOW),
        food_recognition_service=FoodRecognitionService(
            client=recognition_client, model=settings.vision_model
        ),
        close_resources=close_resources,
    )
