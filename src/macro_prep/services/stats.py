"""Statistics over the consumption log."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo

from macro_prep.domain.consumption import ConsumptionRecord, DailyTotals
from macro_prep.domain.profile import Goal, UserProfile

DECEMBER = 12
WEEK_DAYS = 7
CALORIE_BAND = 200


class StatsRepository(Protocol):
    """Read interface for consumption records by date."""

    def list_records_between(self, start: date, end: date) -> list[ConsumptionRecord]:
        """Return records with start <= date < end."""


@dataclass
class PeriodSummary:
    """Aggregated totals for a period."""

    daily: list[DailyTotals]
    avg_calories: float
    avg_protein: float
    avg_carbs: float
    avg_fat: float


@dataclass(frozen=True)
class Consistency:
    """How many logged days met the profile's targets."""

    active_days: int
    calorie_days: int
    protein_days: int


@dataclass
class StatsService:
    """Service for computing daily and period totals."""

    repository: StatsRepository
    timezone_name: str = "UTC"

    def today(self) -> date:
        """Return today's date in the configured timezone."""
        return datetime.now(tz=ZoneInfo(self.timezone_name)).date()

    def get_day(self, day: date | None = None) -> DailyTotals:
        """Return totals for one day, today by default."""
        resolved = day or self.today()
        records = self.repository.list_records_between(
            resolved, resolved + timedelta(days=1)
        )
        return _aggregate_day(resolved, records)

    def get_week(self, end: date | None = None) -> PeriodSummary:
        """Return the seven days ending on `end` (today by default)."""
        last = end or self.today()
        start = last - timedelta(days=WEEK_DAYS - 1)
        records = self.repository.list_records_between(start, last + timedelta(days=1))
        return _aggregate_period(start, WEEK_DAYS, records)

    def get_month(self, day: date | None = None) -> PeriodSummary:
        """Return every day of the month containing `day`."""
        start = (day or self.today()).replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        records = self.repository.list_records_between(start, end)
        return _aggregate_period(start, (end - start).days, records)


def consistency(summary: PeriodSummary, profile: UserProfile) -> Consistency:
    """Count logged days that met the calorie band and protein target."""
    active = [day for day in summary.daily if day.calories > 0]
    return Consistency(
        active_days=len(active),
        calorie_days=sum(1 for day in active if _calories_on_target(day, profile)),
        protein_days=sum(
            1 for day in active if day.protein >= profile.target_protein
        ),
    )


def _calories_on_target(day: DailyTotals, profile: UserProfile) -> bool:
    target = profile.target_calories
    if profile.goal == Goal.MAINTAIN:
        return target - CALORIE_BAND <= day.calories <= target
    if profile.goal == Goal.GAIN:
        return target <= day.calories <= target + CALORIE_BAND
    return day.calories <= target


def _aggregate_day(day: date, records: list[ConsumptionRecord]) -> DailyTotals:
    total = DailyTotals(day=day, calories=0, protein=0, carbs=0, fat=0)
    for record in records:
        if record.date != day:
            continue
        total = DailyTotals(
            day=day,
            calories=total.calories + record.calories,
            protein=total.protein + record.protein,
            carbs=total.carbs + record.carbs,
            fat=total.fat + record.fat,
        )
    return total


def _aggregate_period(
    start: date, days: int, records: list[ConsumptionRecord]
) -> PeriodSummary:
    daily = [
        _aggregate_day(start + timedelta(days=offset), records)
        for offset in range(days)
    ]
    total_days = max(len(daily), 1)
    return PeriodSummary(
        daily=daily,
        avg_calories=sum(day.calories for day in daily) / total_days,
        avg_protein=sum(day.protein for day in daily) / total_days,
        avg_carbs=sum(day.carbs for day in daily) / total_days,
        avg_fat=sum(day.fat for day in daily) / total_days,
    )
