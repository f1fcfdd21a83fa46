"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

MACRO_FIELDS = ("calories", "protein", "carbs", "fats")


@dataclass(frozen=True)
class MealDraft:
    """User-supplied meal fields before the store assigns an id."""

    name: str
    description: str
    date: date
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    analysis: str = ""


@dataclass(frozen=True)
class MealRecord:
    """A meal stored against a calendar day."""

    id: UUID
    owner_id: UUID
    name: str
    description: str
    date: date
    calories: float
    protein: float
    carbs: float
    fats: float
    analysis: str
    created_at: datetime | None
