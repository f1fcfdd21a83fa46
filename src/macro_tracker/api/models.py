"""Pydantic models for API request payloads."""

from datetime import date

from pydantic import BaseModel, Field

from macro_tracker.domain.estimation import MealEstimate


class Credentials(BaseModel):
    """Email and password sign-in payload."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class EstimateRequest(BaseModel):
    """Free-text meal description to estimate."""

    description: str = Field(min_length=1)


class MealCreateRequest(BaseModel):
    """A confirmed estimate to save, optionally hand-corrected."""

    name: str = ""
    estimate: MealEstimate


class MealUpdateRequest(BaseModel):
    """Full replacement of a meal's editable fields."""

    name: str
    description: str
    date: date
    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)
    analysis: str = ""


class MacroUpdateRequest(BaseModel):
    """Granular macro correction; omitted fields are left unchanged."""

    calories: float | None = Field(default=None, ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fats: float | None = Field(default=None, ge=0)


class ProfileUpdateRequest(BaseModel):
    """Calorie target update; null or 0 clears the target."""

    target_calories: int | None = Field(default=None, ge=0)
