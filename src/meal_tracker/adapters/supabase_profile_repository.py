"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_tracker.domain.profiles import ActivityLevel, Profile, ProfileUpdate
from meal_tracker.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "user_id, daily_calorie_goal, weight, height, age, gender, activity_level, "
    "username, timezone"
)


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def upsert_profile(self, user_id: UUID, update: ProfileUpdate) -> Profile:
        """Insert or replace the profile row."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    "user_id": str(user_id),
                    "daily_calorie_goal": update.daily_calorie_goal,
                    "weight": update.weight_kg,
                    "height": update.height_cm,
                    "age": update.age,
                    "gender": update.gender,
                    "activity_level": (
                        update.activity_level.value if update.activity_level else None
                    ),
                    "username": update.username,
                    "timezone": update.timezone,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save profile")
        return _parse_profile(response.data[0])


def _parse_profile(row: dict[str, object]) -> Profile:
    return Profile(
        user_id=UUID(str(row["user_id"])),
        daily_calorie_goal=float(row.get("daily_calorie_goal") or 0.0),
        weight_kg=_optional_float(row.get("weight")),
        height_cm=_optional_float(row.get("height")),
        age=int(row["age"]) if row.get("age") is not None else None,
        gender=row.get("gender"),
        activity_level=ActivityLevel.parse(row.get("activity_level")),
        username=row.get("username"),
        timezone=row.get("timezone"),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None
