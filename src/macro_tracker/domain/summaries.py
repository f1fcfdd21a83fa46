"""Derived, never persisted, aggregation results."""

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from macro_tracker.domain.meals import MealRecord

Granularity = Literal["day", "week"]
CalorieBalance = Literal["surplus", "deficit", "on_target", "no_target"]


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day range; either bound may be unset."""

    start: date | None
    end: date | None

    def contains(self, day: date) -> bool:
        if self.start is None or self.end is None:
            return False
        return self.start <= day <= self.end


@dataclass(frozen=True)
class MacroTotals:
    """Summed macros."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0


@dataclass(frozen=True)
class DaySummary:
    """Totals for one calendar day."""

    date: date
    totals: MacroTotals
    net_calories: float
    meals: list[MealRecord] = field(default_factory=list)


@dataclass(frozen=True)
class WeekSummary:
    """Totals for a 7-day window rolled up from day summaries."""

    start: date
    end: date
    totals: MacroTotals
    net_calories: float
    days: list[DaySummary] = field(default_factory=list)


@dataclass(frozen=True)
class RangeTotals:
    """Totals across every day of the range."""

    totals: MacroTotals
    net_calories: float
    day_count: int
