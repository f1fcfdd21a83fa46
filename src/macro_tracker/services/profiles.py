"""User profile service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.profiles import Profile


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the user's profile if present."""

    def create_profile(self, user_id: UUID) -> Profile:
        """Create an empty profile row."""

    def set_target_calories(self, user_id: UUID, target: int | None) -> Profile:
        """Update the calorie target."""


@dataclass
class ProfileService:
    """Service for per-user settings."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> Profile:
        """Return the user's profile, creating it on first access."""
        existing = self.repository.get_profile(user_id)
        if existing:
            return existing
        return self.repository.create_profile(user_id)

    def get_target(self, user_id: UUID) -> int | None:
        """Return the calorie target, or None when unset."""
        return self.get_profile(user_id).effective_target

    def set_target(self, user_id: UUID, target: int | None) -> Profile:
        """Set the calorie target; None or 0 clears it."""
        if target is not None and target < 0:
            raise ValueError("Target calories must not be negative")
        self.get_profile(user_id)
        return self.repository.set_target_calories(user_id, target or None)
