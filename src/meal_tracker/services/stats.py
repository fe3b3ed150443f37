"""Aggregation of meals into local-day buckets and summaries."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time, timedelta, tzinfo
from uuid import UUID
from zoneinfo import ZoneInfo

from meal_tracker.domain.meals import Meal
from meal_tracker.domain.nutrition import NutritionVector
from meal_tracker.domain.stats import (
    HistoryDay,
    TodaySummary,
    WeeklyEntry,
    WeeklySummary,
)
from meal_tracker.services.meals import MealRepository

WEEK_DAYS = 7
_WEEKDAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def local_day(moment: datetime, tz: tzinfo) -> date:
    """Return the viewer's calendar date for a timestamp.

    Naive timestamps are treated as already being in local time.
    """
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def bucket_by_local_day(meals: Iterable[Meal], tz: tzinfo) -> dict[date, list[Meal]]:
    """Group meals by local calendar day, keeping input order within a day."""
    buckets: dict[date, list[Meal]] = {}
    for meal in meals:
        buckets.setdefault(local_day(meal.logged_at, tz), []).append(meal)
    return buckets


def daily_totals(meals: Iterable[Meal]) -> NutritionVector:
    """Sum the nutrient vectors of a bucket."""
    total = NutritionVector.zero()
    for meal in meals:
        total = total + meal.nutrition
    return total


def sorted_date_keys(buckets: Mapping[date, object]) -> list[date]:
    """Return bucket keys, most recent first."""
    return sorted(buckets, reverse=True)


def exclude_today(date_keys: Iterable[date], today: date) -> list[date]:
    """Drop today's key so history views don't repeat the today view."""
    return [key for key in date_keys if key != today]


def weekly_series(
    meals: Iterable[Meal], today: date | datetime, tz: tzinfo
) -> list[WeeklyEntry]:
    """Return totals for the six days before today through today.

    Days without meals are present with zero totals.
    """
    today_date = _resolve_today(today, tz)
    buckets = bucket_by_local_day(meals, tz)
    series = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = today_date - timedelta(days=offset)
        series.append(
            WeeklyEntry(
                day=day,
                label=_WEEKDAY_ABBREVIATIONS[day.weekday()],
                totals=daily_totals(buckets.get(day, [])),
            )
        )
    return series


def average_daily_calories(series: list[WeeklyEntry]) -> int:
    """Return mean calories per day over the weekly series."""
    return round(sum(entry.totals.calories for entry in series) / WEEK_DAYS)


def history_days(
    meals: Iterable[Meal], today: date | datetime, tz: tzinfo, limit: int = WEEK_DAYS
) -> list[HistoryDay]:
    """Return past days with meals, newest first, excluding today."""
    today_date = _resolve_today(today, tz)
    buckets = bucket_by_local_day(meals, tz)
    keys = exclude_today(sorted_date_keys(buckets), today_date)
    return [
        HistoryDay(
            day=key,
            label=day_label(key, today_date),
            totals=daily_totals(buckets[key]),
            meals=buckets[key],
        )
        for key in keys[: max(limit, 0)]
    ]


def day_label(day: date, today: date) -> str:
    """Return "Yesterday" or a long-form date such as "Monday, March 4, 2024"."""
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%A, %B} {day.day}, {day.year}"


def _resolve_today(today: date | datetime, tz: tzinfo) -> date:
    if isinstance(today, datetime):
        return local_day(today, tz)
    return today


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class StatsService:
    """Service for computing meal summaries in the viewer's timezone."""

    repository: MealRepository
    lookback_days: int = 30
    page_days: int = WEEK_DAYS
    clock: Callable[[], datetime] = field(default=_utc_now)

    def get_today(self, user_id: UUID, timezone_name: str) -> TodaySummary:
        """Return today's meals and totals."""
        tz = ZoneInfo(timezone_name)
        today = local_day(self.clock(), tz)
        meals = self._list_window(user_id, tz, today, days_back=0)
        todays = bucket_by_local_day(meals, tz).get(today, [])
        return TodaySummary(day=today, totals=daily_totals(todays), meals=todays)

    def get_weekly(self, user_id: UUID, timezone_name: str) -> WeeklySummary:
        """Return the rolling seven-day series ending today."""
        tz = ZoneInfo(timezone_name)
        today = local_day(self.clock(), tz)
        meals = self._list_window(user_id, tz, today, days_back=WEEK_DAYS - 1)
        series = weekly_series(meals, today, tz)
        return WeeklySummary(
            entries=series, avg_calories=average_daily_calories(series)
        )

    def get_history(
        self,
        user_id: UUID,
        timezone_name: str,
        days: int | None = None,
        limit: int | None = None,
    ) -> list[HistoryDay]:
        """Return past days within the lookback window, newest first."""
        tz = ZoneInfo(timezone_name)
        today = local_day(self.clock(), tz)
        days_back = self.lookback_days if days is None else days
        page = self.page_days if limit is None else limit
        meals = self._list_window(user_id, tz, today, days_back=days_back)
        return history_days(meals, today, tz, limit=page)

    def _list_window(
        self, user_id: UUID, tz: tzinfo, today: date, days_back: int
    ) -> list[Meal]:
        start = datetime.combine(today - timedelta(days=days_back), time.min, tzinfo=tz)
        end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=tz)
        return self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
