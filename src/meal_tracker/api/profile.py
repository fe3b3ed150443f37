"""Profile and macro target endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request

from meal_tracker.api.auth import current_user_id, require_api_token
from meal_tracker.api.models import profile_payload, targets_payload
from meal_tracker.domain.profiles import ProfileUpdate
from meal_tracker.services.targets import (
    PROTEIN_RICH_FOODS,
    baseline_protein_recommendation,
    calculate_macro_targets,
)

if TYPE_CHECKING:
    from meal_tracker.containers import AppContainer

router = APIRouter(tags=["profile"], dependencies=[Depends(require_api_token)])


@router.get("/profile")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the caller's profile."""
    container: AppContainer = request.app.state.container
    return profile_payload(container.profile_service.get_profile(user_id))


@router.put("/profile")
async def put_profile(
    update: ProfileUpdate,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Create or replace the caller's profile."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.save_profile(user_id, update)
    return profile_payload(profile)


@router.get("/targets")
async def get_targets(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return daily macro targets and the general protein guideline."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.get_profile(user_id)
    return {
        "daily_calorie_goal": profile.daily_calorie_goal,
        **targets_payload(calculate_macro_targets(profile)),
        "baseline_protein_g": baseline_protein_recommendation(profile.weight_kg),
        "protein_foods": [
            {"name": food.name, "protein": food.protein} for food in PROTEIN_RICH_FOODS
        ],
    }
