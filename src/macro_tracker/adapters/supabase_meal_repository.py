"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_tracker.domain.meals import MealDraft, MealRecord
from macro_tracker.services.meals import MealRepository

_COLUMNS = (
    "id, user_id, name, description, date, calories, protein, carbs, fats, "
    "analysis, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the meals table."""

    client: Client

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealRecord]:
        """Return meals in the inclusive date range, newest first."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("date", start.isoformat())
            .lte("date", end.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_meal(self, user_id: UUID, draft: MealDraft) -> MealRecord:
        """Insert a meal row and return it."""
        payload = _draft_payload(draft)
        payload["user_id"] = str(user_id)
        response = self.client.table("meals").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create meal in Supabase")
        return _parse_row(response.data[0])

    def replace_meal(
        self, user_id: UUID, meal_id: UUID, draft: MealDraft
    ) -> MealRecord | None:
        """Overwrite every editable column of a meal."""
        response = (
            self.client.table("meals")
            .update(_draft_payload(draft))
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def update_macros(
        self, user_id: UUID, meal_id: UUID, macros: dict[str, float]
    ) -> MealRecord | None:
        """Update selected macro columns."""
        response = (
            self.client.table("meals")
            .update(dict(macros))
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal row."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _draft_payload(draft: MealDraft) -> dict[str, object]:
    return {
        "name": draft.name,
        "description": draft.description,
        "date": draft.date.isoformat(),
        "calories": draft.calories,
        "protein": draft.protein,
        "carbs": draft.carbs,
        "fats": draft.fats,
        "analysis": draft.analysis,
    }


def _parse_row(row: dict[str, object]) -> MealRecord:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else None
    )
    return MealRecord(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        description=str(row.get("description") or ""),
        date=date.fromisoformat(str(row["date"])[:10]),
        calories=_as_number(row.get("calories")),
        protein=_as_number(row.get("protein")),
        carbs=_as_number(row.get("carbs")),
        fats=_as_number(row.get("fats")),
        analysis=str(row.get("analysis") or ""),
        created_at=created_at,
    )


def _as_number(value: object) -> float:
    """Coerce a macro column to a number, defaulting to 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return value
    try:
        return float(str(value))
    except ValueError:
        return 0
