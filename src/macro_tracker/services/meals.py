"""Meal store service."""

from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from macro_tracker.domain.meals import MACRO_FIELDS, MealDraft, MealRecord
from macro_tracker.domain.summaries import DateRange


class MealRepository(Protocol):
    """Persistence interface for meals."""

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealRecord]:
        """Return meals dated within the inclusive range, newest first."""

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a meal by id if the user owns it."""

    def create_meal(self, user_id: UUID, draft: MealDraft) -> MealRecord:
        """Create and return a meal."""

    def replace_meal(
        self, user_id: UUID, meal_id: UUID, draft: MealDraft
    ) -> MealRecord | None:
        """Replace every user-editable field of a meal."""

    def update_macros(
        self, user_id: UUID, meal_id: UUID, macros: dict[str, float]
    ) -> MealRecord | None:
        """Update a subset of a meal's macros."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal and return True if it existed."""


@dataclass
class MealService:
    """Service for meal CRUD scoped to the owning user."""

    repository: MealRepository

    def list_meals(self, user_id: UUID, date_range: DateRange) -> list[MealRecord]:
        """Return the user's meals for a range, or nothing for a partial range."""
        if date_range.start is None or date_range.end is None:
            return []
        return self.repository.list_meals(user_id, date_range.start, date_range.end)

    def get_meal(self, user_id: UUID, meal_id: UUID) -> MealRecord | None:
        """Return a single meal."""
        return self.repository.get_meal(user_id, meal_id)

    def create_meal(self, user_id: UUID, draft: MealDraft) -> MealRecord:
        """Persist a new meal."""
        _check_macros(_draft_macros(draft))
        return self.repository.create_meal(user_id, draft)

    def update_meal(
        self, user_id: UUID, meal_id: UUID, draft: MealDraft
    ) -> MealRecord | None:
        """Replace a meal's fields."""
        _check_macros(_draft_macros(draft))
        return self.repository.replace_meal(user_id, meal_id, draft)

    def update_macros(
        self,
        user_id: UUID,
        meal_id: UUID,
        *,
        calories: float | None = None,
        protein: float | None = None,
        carbs: float | None = None,
        fats: float | None = None,
    ) -> MealRecord | None:
        """Hand-correct individual macros after an imperfect estimate."""
        changes = {
            name: value
            for name, value in (
                ("calories", calories),
                ("protein", protein),
                ("carbs", carbs),
                ("fats", fats),
            )
            if value is not None
        }
        if not changes:
            return self.repository.get_meal(user_id, meal_id)
        _check_macros(changes)
        return self.repository.update_macros(user_id, meal_id, changes)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal."""
        return self.repository.delete_meal(user_id, meal_id)


def _check_macros(macros: dict[str, float]) -> None:
    for name, value in macros.items():
        if value < 0:
            raise ValueError(f"{name} must not be negative")


def _draft_macros(draft: MealDraft) -> dict[str, float]:
    return {name: getattr(draft, name) for name in MACRO_FIELDS}
