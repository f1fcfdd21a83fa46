"""Date-bucketed macro aggregation.

Every figure is derived from ``daily_totals`` so day, week and range numbers
always agree with each other. These functions read nothing beyond their
arguments; callers pass the target explicitly and sort results explicitly.
"""

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from macro_tracker.domain.meals import MealRecord
from macro_tracker.domain.summaries import (
    CalorieBalance,
    DateRange,
    DaySummary,
    MacroTotals,
    RangeTotals,
    WeekSummary,
)

WEEK_DAYS = 7


def daily_totals(
    meals: Sequence[MealRecord], date_range: DateRange, target: int | None
) -> list[DaySummary]:
    """Return one summary per calendar day of the range, empty days included."""
    goal = target or 0
    days = []
    for day in enumerate_days(date_range):
        day_meals = [meal for meal in meals if meal.date == day]
        totals = _sum_meals(day_meals)
        days.append(
            DaySummary(
                date=day,
                totals=totals,
                net_calories=totals.calories - goal,
                meals=day_meals,
            )
        )
    return days


def weekly_totals(
    days: Sequence[DaySummary], date_range: DateRange
) -> list[WeekSummary]:
    """Roll day summaries into 7-day windows anchored at the range end.

    Windows walk backward from ``date_range.end``; the earliest one is
    clipped to ``date_range.start`` and kept even when short. Windows with
    no member days are dropped. Results are most recent first.
    """
    if date_range.start is None or date_range.end is None:
        return []
    weeks = []
    window_end = date_range.end
    while window_end >= date_range.start:
        window_start = max(
            window_end - timedelta(days=WEEK_DAYS - 1), date_range.start
        )
        members = [day for day in days if window_start <= day.date <= window_end]
        if members:
            weeks.append(
                WeekSummary(
                    start=window_start,
                    end=window_end,
                    totals=_sum_totals(day.totals for day in members),
                    net_calories=sum(day.net_calories for day in members),
                    days=members,
                )
            )
        window_end -= timedelta(days=WEEK_DAYS)
    return weeks


def range_totals(days: Sequence[DaySummary]) -> RangeTotals:
    """Sum every day summary of the range."""
    return RangeTotals(
        totals=_sum_totals(day.totals for day in days),
        net_calories=sum(day.net_calories for day in days),
        day_count=len(days),
    )


def sort_days(
    days: Iterable[DaySummary], *, descending: bool = False
) -> list[DaySummary]:
    """Return day summaries ordered by date."""
    return sorted(days, key=lambda day: day.date, reverse=descending)


def sort_weeks(
    weeks: Iterable[WeekSummary], *, descending: bool = False
) -> list[WeekSummary]:
    """Return week summaries ordered by window start."""
    return sorted(weeks, key=lambda week: week.start, reverse=descending)


def calorie_balance(net_calories: float, target: int | None) -> CalorieBalance:
    """Classify net calories against a target."""
    if not target:
        return "no_target"
    if net_calories > 0:
        return "surplus"
    if net_calories < 0:
        return "deficit"
    return "on_target"


def enumerate_days(date_range: DateRange) -> list[date]:
    """Return every calendar day of the range, inclusive."""
    if date_range.start is None or date_range.end is None:
        return []
    count = (date_range.end - date_range.start).days + 1
    return [date_range.start + timedelta(days=offset) for offset in range(count)]


def _sum_meals(meals: Iterable[MealRecord]) -> MacroTotals:
    total = MacroTotals()
    for meal in meals:
        total = MacroTotals(
            calories=total.calories + meal.calories,
            protein=total.protein + meal.protein,
            carbs=total.carbs + meal.carbs,
            fats=total.fats + meal.fats,
        )
    return total


def _sum_totals(items: Iterable[MacroTotals]) -> MacroTotals:
    total = MacroTotals()
    for item in items:
        total = MacroTotals(
            calories=total.calories + item.calories,
            protein=total.protein + item.protein,
            carbs=total.carbs + item.carbs,
            fats=total.fats + item.fats,
        )
    return total
