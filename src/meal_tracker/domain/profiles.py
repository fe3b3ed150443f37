"""Domain models for user profiles."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator


class ActivityLevel(StrEnum):
    """Self-reported daily activity."""

    SEDENTARY = "sedentary"
    LIGHTLY_ACTIVE = "lightly_active"
    MODERATELY_ACTIVE = "moderately_active"
    VERY_ACTIVE = "very_active"
    EXTREMELY_ACTIVE = "extremely_active"

    @classmethod
    def parse(cls, raw: object) -> "ActivityLevel | None":
        """Return the matching level, or None for missing or unknown values."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Profile:
    """Nutrition profile captured at onboarding."""

    user_id: UUID
    daily_calorie_goal: float
    weight_kg: float | None = None
    height_cm: float | None = None
    age: int | None = None
    gender: str | None = None
    activity_level: ActivityLevel | None = None
    username: str | None = None
    timezone: str | None = None


class ProfileUpdate(BaseModel):
    """Validated profile input from onboarding or the settings screen."""

    daily_calorie_goal: float = Field(gt=0)
    weight_kg: float | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    age: int | None = Field(default=None, gt=0)
    gender: str | None = None
    activity_level: ActivityLevel | None = None
    username: str | None = Field(default=None, max_length=100)
    timezone: str | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise ValueError(f"unknown timezone {value!r}") from exc
        return value
