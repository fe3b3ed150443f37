"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_tracker.domain.meals import Meal, MealDraft, MealType, ServingMetadata
from meal_tracker.domain.nutrition import NutritionVector
from meal_tracker.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, name, calories, protein, carbs, fat, fiber, meal_type, "
    "logged_at, image_url, serving_size, estimated_serving, serving_unit, confidence"
)

_NUTRIENT_COLUMNS = {
    "calories": "calories",
    "protein_g": "protein",
    "carbs_g": "carbs",
    "fat_g": "fat",
    "fiber_g": "fiber",
}


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meal persistence."""

    client: Client

    def list_meals(self, user_id: UUID, start: datetime, end: datetime) -> list[Meal]:
        """Return meals in the time range, newest first."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("logged_at", start.isoformat())
            .lt("logged_at", end.isoformat())
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: UUID) -> Meal | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def insert_meal(self, user_id: UUID, draft: MealDraft) -> Meal:
        """Create a meal row and return it."""
        payload = _to_row(draft.model_dump(exclude={"serving"}))
        payload["user_id"] = str(user_id)
        payload.update(_serving_columns(draft.serving))
        response = self.client.table("meals").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_meal(response.data[0])

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> Meal | None:
        """Update the given columns of a meal row."""
        fields = dict(changes)
        payload = {}
        if "serving" in fields:
            serving = fields.pop("serving")
            payload.update(
                _serving_columns(
                    ServingMetadata.model_validate(serving) if serving else None
                )
            )
        payload.update(_to_row(fields))
        response = (
            self.client.table("meals").update(payload).eq("id", str(meal_id)).execute()
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def delete_meal(self, meal_id: UUID) -> None:
        """Delete a meal row."""
        self.client.table("meals").delete().eq("id", str(meal_id)).execute()


def _to_row(fields: dict[str, object]) -> dict[str, object]:
    row: dict[str, object] = {}
    for key, value in fields.items():
        column = _NUTRIENT_COLUMNS.get(key, key)
        if isinstance(value, datetime):
            row[column] = value.isoformat()
        elif isinstance(value, MealType):
            row[column] = value.value
        else:
            row[column] = value
    return row


def _serving_columns(serving: ServingMetadata | None) -> dict[str, object]:
    if serving is None:
        return {
            "serving_size": None,
            "estimated_serving": None,
            "serving_unit": None,
            "confidence": None,
        }
    return {
        "serving_size": serving.factor,
        "estimated_serving": serving.estimated_serving,
        "serving_unit": serving.unit,
        "confidence": serving.confidence,
    }


def _parse_meal(row: dict[str, object]) -> Meal:
    serving = None
    if row.get("serving_size") is not None:
        serving = ServingMetadata(
            factor=float(row["serving_size"]),
            estimated_serving=row.get("estimated_serving"),
            unit=row.get("serving_unit"),
            confidence=row.get("confidence"),
        )
    return Meal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        nutrition=NutritionVector(
            calories=float(row.get("calories") or 0.0),
            protein_g=float(row.get("protein") or 0.0),
            carbs_g=float(row.get("carbs") or 0.0),
            fat_g=float(row.get("fat") or 0.0),
            fiber_g=float(row.get("fiber") or 0.0),
        ),
        meal_type=MealType(str(row["meal_type"])),
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
        image_url=row.get("image_url"),
        serving=serving,
    )
