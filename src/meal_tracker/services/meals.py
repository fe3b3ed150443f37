"""Meal logging service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel, ValidationError

from meal_tracker.domain.meals import Meal, MealDraft, MealPatch, MealType
from meal_tracker.domain.vision import NutritionEstimate
from meal_tracker.errors import InvalidInput, NotFound
from meal_tracker.services.serving import draft_from_estimate

_logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals logged in [start, end), newest first."""

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id, if present."""

    def insert_meal(self, user_id: UUID, draft: MealDraft) -> Meal:
        """Persist a new meal and return it."""

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> Meal | None:
        """Apply a partial update and return the stored meal."""

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal."""


@dataclass
class MealService:
    """Validates meal input before it reaches the store."""

    repository: MealRepository
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    def log_meal(self, user_id: UUID, payload: MealDraft | dict[str, object]) -> Meal:
        """Validate and persist a new meal, stamping it with the current time."""
        draft = _validate(MealDraft, payload)
        if draft.logged_at is None:
            draft = draft.model_copy(update={"logged_at": self.clock()})
        meal = self.repository.insert_meal(user_id, draft)
        _logger.info("Meal logged: meal_id=%s type=%s", meal.id, meal.meal_type)
        return meal

    def log_estimate(
        self,
        user_id: UUID,
        estimate: NutritionEstimate,
        factor: float,
        meal_type: MealType,
        image_url: str | None = None,
    ) -> Meal:
        """Persist a recognition result scaled to the chosen serving factor."""
        try:
            draft = draft_from_estimate(
                estimate, factor, meal_type, image_url=image_url
            )
        except ValidationError as exc:
            raise InvalidInput.from_validation_error(exc) from exc
        return self.log_meal(user_id, draft)

    def update_meal(
        self, user_id: UUID, meal_id: UUID, payload: MealPatch | dict[str, object]
    ) -> Meal:
        """Apply a partial update to one of the user's meals."""
        patch = _validate(MealPatch, payload)
        self._get_owned(user_id, meal_id)
        changes = patch.changes()
        if not changes:
            raise InvalidInput("No fields to update")
        updated = self.repository.update_meal(meal_id, changes)
        if updated is None:
            raise NotFound(f"Meal {meal_id} not found")
        return updated

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete one of the user's meals."""
        self._get_owned(user_id, meal_id)
        self.repository.delete_meal(meal_id)
        _logger.info("Meal deleted: meal_id=%s", meal_id)

    def get_meal(self, user_id: UUID, meal_id: UUID) -> Meal:
        """Return one of the user's meals."""
        return self._get_owned(user_id, meal_id)

    def _get_owned(self, user_id: UUID, meal_id: UUID) -> Meal:
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            raise NotFound(f"Meal {meal_id} not found")
        return meal


def _validate(
    model: type[_ModelT], payload: _ModelT | dict[str, object]
) -> _ModelT:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput.from_validation_error(exc) from exc
