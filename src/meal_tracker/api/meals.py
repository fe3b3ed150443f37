"""Meal logging, summaries and food recognition endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, Response, status

from meal_tracker.api.auth import current_user_id, require_api_token
from meal_tracker.api.models import (
    AnalyzeFoodRequest,
    LogEstimateRequest,
    ScaleRequest,
    history_day_payload,
    meal_payload,
    targets_payload,
    vector_payload,
    weekly_entry_payload,
)
from meal_tracker.domain.meals import MealDraft, MealPatch
from meal_tracker.services.serving import (
    MAX_SLIDER_FACTOR,
    MIN_SLIDER_FACTOR,
    SLIDER_STEP,
    portion_label,
    round_for_display,
    scale_nutrition,
)
from meal_tracker.services.targets import calculate_macro_targets

if TYPE_CHECKING:
    from meal_tracker.containers import AppContainer

router = APIRouter(tags=["meals"], dependencies=[Depends(require_api_token)])


@router.get("/dashboard")
async def dashboard(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return today's meals and totals next to the user's goals."""
    container: AppContainer = request.app.state.container
    profile = container.profile_service.get_profile(user_id)
    timezone = profile.timezone or container.profile_service.default_timezone
    today = container.stats_service.get_today(user_id, timezone)
    return {
        "date": today.day.isoformat(),
        "daily_calorie_goal": profile.daily_calorie_goal,
        "targets": targets_payload(calculate_macro_targets(profile)),
        "totals": vector_payload(today.totals),
        "meals": [meal_payload(meal) for meal in today.meals],
    }


@router.get("/meals/weekly")
async def weekly(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Return the rolling seven-day series ending today."""
    container: AppContainer = request.app.state.container
    timezone = container.profile_service.get_timezone(user_id)
    summary = container.stats_service.get_weekly(user_id, timezone)
    return {
        "entries": [weekly_entry_payload(entry) for entry in summary.entries],
        "avg_calories": summary.avg_calories,
    }


@router.get("/meals/history")
async def history(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    days: int | None = Query(default=None, ge=1, le=365),
    limit: int | None = Query(default=None, ge=1, le=365),
) -> dict[str, object]:
    """Return past days with meals, newest first, excluding today."""
    container: AppContainer = request.app.state.container
    timezone = container.profile_service.get_timezone(user_id)
    entries = container.stats_service.get_history(
        user_id, timezone, days=days, limit=limit
    )
    return {"days": [history_day_payload(day) for day in entries]}


@router.post("/meals", status_code=status.HTTP_201_CREATED)
async def log_meal(
    draft: MealDraft, request: Request, user_id: UUID = Depends(current_user_id)
) -> dict[str, object]:
    """Log a manually entered meal."""
    container: AppContainer = request.app.state.container
    return meal_payload(container.meal_service.log_meal(user_id, draft))


@router.post("/meals/from-estimate", status_code=status.HTTP_201_CREATED)
async def log_estimate(
    body: LogEstimateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Log a recognized dish at the serving factor the user picked."""
    container: AppContainer = request.app.state.container
    meal = container.meal_service.log_estimate(
        user_id,
        body.estimate,
        body.factor,
        body.meal_type,
        image_url=body.image_url,
    )
    return meal_payload(meal)


@router.patch("/meals/{meal_id}")
async def update_meal(
    meal_id: UUID,
    patch: MealPatch,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Edit fields of a logged meal."""
    container: AppContainer = request.app.state.container
    return meal_payload(container.meal_service.update_meal(user_id, meal_id, patch))


@router.delete("/meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> Response:
    """Delete a logged meal."""
    container: AppContainer = request.app.state.container
    container.meal_service.delete_meal(user_id, meal_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/analyze-food")
async def analyze_food(body: AnalyzeFoodRequest, request: Request) -> dict[str, object]:
    """Estimate nutrition for a food photo."""
    container: AppContainer = request.app.state.container
    estimate = await container.food_recognition_service.analyze_food(body.image)
    return estimate.model_dump()


@router.post("/serving/scale")
async def scale_serving(body: ScaleRequest) -> dict[str, object]:
    """Scale a base nutrient vector to a serving factor."""
    scaled = scale_nutrition(body.base.to_vector(), body.factor)
    return {
        "factor": body.factor,
        "label": portion_label(body.factor),
        "nutrition": vector_payload(scaled),
        "display": vector_payload(round_for_display(scaled)),
        "slider": {
            "min": MIN_SLIDER_FACTOR,
            "max": MAX_SLIDER_FACTOR,
            "step": SLIDER_STEP,
        },
    }
