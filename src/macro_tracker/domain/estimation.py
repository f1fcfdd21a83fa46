"""Models for nutrition estimation results."""

from pydantic import BaseModel, Field

from macro_tracker.domain.meals import MACRO_FIELDS


class MealEstimate(BaseModel):
    """Macros parsed from an estimation reply.

    ``present`` records which macros were actually found in the reply, so a
    parsed zero can be told apart from a missing line.
    """

    description: str
    analysis: str
    calories: int = Field(default=0, ge=0)
    protein: int = Field(default=0, ge=0)
    carbs: int = Field(default=0, ge=0)
    fats: int = Field(default=0, ge=0)
    present: dict[str, bool] = Field(
        default_factory=lambda: dict.fromkeys(MACRO_FIELDS, False)
    )

    def missing_fields(self) -> list[str]:
        """Return macros that were not found in the reply."""
        return [name for name in MACRO_FIELDS if not self.present.get(name, False)]
