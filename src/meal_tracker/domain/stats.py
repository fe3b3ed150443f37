"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date

from meal_tracker.domain.meals import Meal
from meal_tracker.domain.nutrition import NutritionVector


@dataclass(frozen=True)
class WeeklyEntry:
    """One day of the rolling seven-day series."""

    day: date
    label: str
    totals: NutritionVector


@dataclass(frozen=True)
class HistoryDay:
    """A past day with its meals and totals."""

    day: date
    label: str
    totals: NutritionVector
    meals: list[Meal]


@dataclass(frozen=True)
class TodaySummary:
    """Today's meals with their totals."""

    day: date
    totals: NutritionVector
    meals: list[Meal]


@dataclass(frozen=True)
class WeeklySummary:
    """Seven-day series with its average daily calories."""

    entries: list[WeeklyEntry]
    avg_calories: int
