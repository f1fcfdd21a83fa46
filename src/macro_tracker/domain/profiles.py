"""Domain models for user profiles."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Profile:
    """Per-user settings."""

    user_id: UUID
    target_calories: int | None

    @property
    def effective_target(self) -> int | None:
        """Return the target, treating 0 as unset."""
        return self.target_calories or None
