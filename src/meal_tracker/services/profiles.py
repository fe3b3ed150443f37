"""Profile and macro target service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from meal_tracker.domain.nutrition import MacroTargets
from meal_tracker.domain.profiles import Profile, ProfileUpdate
from meal_tracker.errors import InvalidInput, NotFound
from meal_tracker.services.targets import calculate_macro_targets

DEFAULT_TIMEZONE = "UTC"


class ProfileRepository(Protocol):
    """Persistence interface for user profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the user's profile, if onboarding is done."""

    def upsert_profile(self, user_id: UUID, update: ProfileUpdate) -> Profile:
        """Create or replace the user's profile."""


@dataclass
class ProfileService:
    """Application service for profiles and the targets derived from them."""

    repository: ProfileRepository
    default_timezone: str = DEFAULT_TIMEZONE

    def get_profile(self, user_id: UUID) -> Profile:
        """Return the user's profile or raise NotFound before onboarding."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise NotFound("Profile not set up yet")
        return profile

    def save_profile(
        self, user_id: UUID, payload: ProfileUpdate | dict[str, object]
    ) -> Profile:
        """Validate and persist profile fields."""
        if isinstance(payload, ProfileUpdate):
            update = payload
        else:
            try:
                update = ProfileUpdate.model_validate(payload)
            except ValidationError as exc:
                raise InvalidInput.from_validation_error(exc) from exc
        return self.repository.upsert_profile(user_id, update)

    def get_timezone(self, user_id: UUID) -> str:
        """Return the viewer's timezone, defaulting when unset or missing."""
        profile = self.repository.get_profile(user_id)
        if profile is None or not profile.timezone:
            return self.default_timezone
        return profile.timezone

    def get_targets(self, user_id: UUID) -> MacroTargets:
        """Return macro targets for the user's current profile."""
        return calculate_macro_targets(self.get_profile(user_id))
