"""Supabase repository for user profiles."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_tracker.domain.profiles import Profile
from macro_tracker.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for the profiles table."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("profiles")
            .select("id, target_calories")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_profile(self, user_id: UUID) -> Profile:
        """Insert an empty profile row."""
        response = (
            self.client.table("profiles")
            .insert({"id": str(user_id), "target_calories": None})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        return _parse_row(response.data[0])

    def set_target_calories(self, user_id: UUID, target: int | None) -> Profile:
        """Update the calorie target."""
        response = (
            self.client.table("profiles")
            .update({"target_calories": target})
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update profile in Supabase")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> Profile:
    target = row.get("target_calories")
    return Profile(
        user_id=UUID(str(row["id"])),
        target_calories=int(target) if target is not None else None,
    )
