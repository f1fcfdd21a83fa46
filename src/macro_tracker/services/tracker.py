"""Tracker screen service: fetch, aggregate, mutate and refetch."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from macro_tracker.domain.estimation import MealEstimate
from macro_tracker.domain.meals import MealDraft, MealRecord
from macro_tracker.domain.summaries import (
    CalorieBalance,
    DateRange,
    DaySummary,
    Granularity,
    RangeTotals,
    WeekSummary,
)
from macro_tracker.services.aggregation import (
    calorie_balance,
    daily_totals,
    range_totals,
    sort_days,
    sort_weeks,
    weekly_totals,
)
from macro_tracker.services.meals import MealService
from macro_tracker.services.profiles import ProfileService

_logger = logging.getLogger(__name__)


class MealNotFoundError(LookupError):
    """Raised when a meal does not exist for the user."""


@dataclass(frozen=True)
class ChartPoint:
    """One bar of the trend chart."""

    start: date
    end: date
    calories: float
    protein: float
    carbs: float
    fats: float
    net_calories: float
    balance: CalorieBalance


@dataclass(frozen=True)
class TrackerView:
    """Everything the tracker screen renders for a range."""

    date_range: DateRange
    granularity: Granularity
    target_calories: int | None
    days: list[DaySummary]
    weeks: list[WeekSummary]
    totals: RangeTotals
    totals_balance: CalorieBalance
    chart: list[ChartPoint]
    meals: list[MealRecord]


@dataclass
class TrackerService:
    """Builds tracker views from explicit user, range and target context."""

    meal_service: MealService
    profile_service: ProfileService

    def load_view(
        self,
        user_id: UUID,
        date_range: DateRange,
        granularity: Granularity = "day",
        *,
        descending: bool = True,
    ) -> TrackerView:
        """Fetch meals and the target, then aggregate them."""
        target = self.profile_service.get_target(user_id)
        meals = self.meal_service.list_meals(user_id, date_range)
        return build_view(
            meals, date_range, target, granularity, descending=descending
        )

    def add_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        date_range: DateRange,
        estimate: MealEstimate,
        name: str = "",
        granularity: Granularity = "day",
    ) -> TrackerView:
        """Save a confirmed estimate on the first day of the range."""
        if date_range.start is None:
            raise ValueError("A date range is required to add a meal")
        if not name.strip():
            existing = self.meal_service.list_meals(user_id, date_range)
            name = f"Meal {len(existing) + 1}"
        meal = self.meal_service.create_meal(
            user_id,
            MealDraft(
                name=name.strip(),
                description=estimate.description,
                date=date_range.start,
                calories=estimate.calories,
                protein=estimate.protein,
                carbs=estimate.carbs,
                fats=estimate.fats,
                analysis=estimate.analysis,
            ),
        )
        _logger.info("Meal created: id=%s date=%s", meal.id, meal.date)
        return self.load_view(user_id, date_range, granularity)

    def edit_meal(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_id: UUID,
        draft: MealDraft,
        date_range: DateRange,
        granularity: Granularity = "day",
    ) -> TrackerView:
        """Replace a meal and return the refreshed view."""
        updated = self.meal_service.update_meal(user_id, meal_id, draft)
        if updated is None:
            raise MealNotFoundError(str(meal_id))
        return self.load_view(user_id, date_range, granularity)

    def edit_macros(  # noqa: PLR0913
        self,
        user_id: UUID,
        meal_id: UUID,
        macros: dict[str, float],
        date_range: DateRange,
        granularity: Granularity = "day",
    ) -> TrackerView:
        """Hand-correct macros and return the refreshed view."""
        updated = self.meal_service.update_macros(user_id, meal_id, **macros)
        if updated is None:
            raise MealNotFoundError(str(meal_id))
        return self.load_view(user_id, date_range, granularity)

    def remove_meal(
        self,
        user_id: UUID,
        meal_id: UUID,
        date_range: DateRange,
        granularity: Granularity = "day",
    ) -> TrackerView:
        """Delete a meal and return the refreshed view."""
        if not self.meal_service.delete_meal(user_id, meal_id):
            raise MealNotFoundError(str(meal_id))
        _logger.info("Meal deleted: id=%s", meal_id)
        return self.load_view(user_id, date_range, granularity)

    def set_target(
        self,
        user_id: UUID,
        target: int | None,
        date_range: DateRange,
        granularity: Granularity = "day",
    ) -> TrackerView:
        """Change the calorie target and return the refreshed view."""
        self.profile_service.set_target(user_id, target)
        return self.load_view(user_id, date_range, granularity)


def build_view(
    meals: list[MealRecord],
    date_range: DateRange,
    target: int | None,
    granularity: Granularity,
    *,
    descending: bool = True,
) -> TrackerView:
    """Aggregate meals into a tracker view."""
    days = daily_totals(meals, date_range, target)
    weeks = weekly_totals(days, date_range)
    totals = range_totals(days)
    return TrackerView(
        date_range=date_range,
        granularity=granularity,
        target_calories=target,
        days=sort_days(days, descending=descending),
        weeks=sort_weeks(weeks, descending=descending),
        totals=totals,
        totals_balance=calorie_balance(totals.net_calories, target),
        chart=_chart_points(days, weeks, target, granularity),
        meals=[meal for meal in meals if date_range.contains(meal.date)],
    )


def _chart_points(
    days: list[DaySummary],
    weeks: list[WeekSummary],
    target: int | None,
    granularity: Granularity,
) -> list[ChartPoint]:
    if granularity == "week":
        return [
            ChartPoint(
                start=week.start,
                end=week.end,
                calories=week.totals.calories,
                protein=week.totals.protein,
                carbs=week.totals.carbs,
                fats=week.totals.fats,
                net_calories=week.net_calories,
                balance=calorie_balance(week.net_calories, target),
            )
            for week in sort_weeks(weeks)
        ]
    return [
        ChartPoint(
            start=day.date,
            end=day.date,
            calories=day.totals.calories,
            protein=day.totals.protein,
            carbs=day.totals.carbs,
            fats=day.totals.fats,
            net_calories=day.net_calories,
            balance=calorie_balance(day.net_calories, target),
        )
        for day in sort_days(days)
    ]
