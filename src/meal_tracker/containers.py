"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from meal_tracker.adapters.openai_vision_client import OpenAIFoodRecognitionClient
from meal_tracker.adapters.supabase_meal_repository import SupabaseMealRepository
from meal_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from meal_tracker.config import Settings
from meal_tracker.services.meals import MealService
from meal_tracker.services.profiles import ProfileService
from meal_tracker.services.stats import StatsService
from meal_tracker.services.vision import FoodRecognitionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    meal_service: MealService
    stats_service: StatsService
    food_recognition_service: FoodRecognitionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    recognition_client = OpenAIFoodRecognitionClient.create(
        api_key=resolved_settings.vision_api_key,
        base_url=resolved_settings.vision_base_url,
        timeout_seconds=resolved_settings.vision_timeout_seconds,
    )
    food_recognition_service = FoodRecognitionService(
        client=recognition_client,
        model=resolved_settings.vision_model,
        temperature=resolved_settings.vision_temperature,
    )
    stats_service = StatsService(
        meal_repository,
        lookback_days=resolved_settings.history_days,
        page_days=resolved_settings.history_page_days,
    )

    async def close_resources() -> None:
        await recognition_client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=ProfileService(
            profile_repository, default_timezone=resolved_settings.default_timezone
        ),
        meal_service=MealService(meal_repository),
        stats_service=stats_service,
        food_recognition_service=food_recognition_service,
        close_resources=close_resources,
    )
