"""Tests for the meal store service."""

from datetime import date
from uuid import uuid4

import pytest

from macro_tracker.domain.meals import MealDraft
from macro_tracker.domain.summaries import DateRange
from macro_tracker.services.meals import MealService
from tests.conftest import InMemoryMealRepository


def _draft(day: date = date(2024, 4, 1), calories: float = 100) -> MealDraft:
    return MealDraft(name="Lunch", description="soup", date=day, calories=calories)


def test_list_meals_skips_partial_range() -> None:
    repo = InMemoryMealRepository()
    service = MealService(repo)

    partial = DateRange(start=date(2024, 4, 1), end=None)

    assert service.list_meals(uuid4(), partial) == []
    assert repo.list_calls == 0


def test_meals_are_scoped_to_owner() -> None:
    service = MealService(InMemoryMealRepository())
    owner = uuid4()
    meal = service.create_meal(owner, _draft())

    assert service.get_meal(owner, meal.id) == meal
    assert service.get_meal(uuid4(), meal.id) is None
    assert service.delete_meal(uuid4(), meal.id) is False
    assert service.delete_meal(owner, meal.id) is True


def test_update_meal_replaces_fields() -> None:
    service = MealService(InMemoryMealRepository())
    owner = uuid4()
    meal = service.create_meal(owner, _draft())

    updated = service.update_meal(
        owner,
        meal.id,
        MealDraft(
            name="Dinner",
            description="stew",
            date=date(2024, 4, 2),
            calories=650,
            protein=40,
        ),
    )

    assert updated is not None
    assert updated.name == "Dinner"
    assert updated.date == date(2024, 4, 2)
    assert updated.analysis == ""
    assert updated.protein == 40


def test_update_macros_changes_only_given_fields() -> None:
    service = MealService(InMemoryMealRepository())
    owner = uuid4()
    meal = service.create_meal(owner, _draft(calories=100))

    updated = service.update_macros(owner, meal.id, protein=12.5)

    assert updated is not None
    assert updated.protein == 12.5
    assert updated.calories == 100


def test_update_macros_without_changes_returns_meal() -> None:
    service = MealService(InMemoryMealRepository())
    owner = uuid4()
    meal = service.create_meal(owner, _draft())

    assert service.update_macros(owner, meal.id) == meal


def test_negative_macros_are_rejected() -> None:
    service = MealService(InMemoryMealRepository())
    owner = uuid4()

    with pytest.raises(ValueError):
        service.create_meal(owner, _draft(calories=-1))
    meal = service.create_meal(owner, _draft())
    with pytest.raises(ValueError):
        service.update_macros(owner, meal.id, fats=-3)
