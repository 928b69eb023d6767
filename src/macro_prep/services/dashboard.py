"""Daily dashboard: progress against targets plus a protein strategy."""

from dataclasses import dataclass
from datetime import date

from macro_prep.domain.distribution import Recommendation
from macro_prep.errors import NotFoundError
from macro_prep.services.aggregator import round_half_up
from macro_prep.services.events import ChangeFeed, LiveQuery
from macro_prep.services.ledger import ConsumptionLedger
from macro_prep.services.profile import ProfileService
from macro_prep.services.stats import StatsService
from macro_prep.services.strategy import recommend

WATCHED_COLLECTIONS = ("logs", "fridge", "user")


@dataclass(frozen=True)
class DashboardSnapshot:
    """Derived view of one day's progress."""

    day: date
    consumed_calories: int
    consumed_protein: int
    consumed_carbs: int
    consumed_fat: int
    remaining_calories: int
    remaining_protein: int
    calorie_percent: float
    protein_percent: float
    recommendation: Recommendation | None


@dataclass
class DashboardService:
    """Builds dashboard snapshots from the log, fridge and profile."""

    ledger: ConsumptionLedger
    stats_service: StatsService
    profile_service: ProfileService
    feed: ChangeFeed

    def build(self, day: date | None = None) -> DashboardSnapshot:
        """Compute a fresh snapshot for a day, today by default."""
        profile = self.profile_service.get()
        if profile is None:
            raise NotFoundError("Profile has not been set up")
        totals = self.stats_service.get_day(day)
        calories = round_half_up(totals.calories)
        protein = round_half_up(totals.protein)
        remaining_protein = max(0, profile.target_protein - protein)
        return DashboardSnapshot(
            day=totals.day,
            consumed_calories=calories,
            consumed_protein=protein,
            consumed_carbs=round_half_up(totals.carbs),
            consumed_fat=round_half_up(totals.fat),
            remaining_calories=max(0, profile.target_calories - calories),
            remaining_protein=remaining_protein,
            calorie_percent=_percent(calories, profile.target_calories),
            protein_percent=_percent(protein, profile.target_protein),
            recommendation=recommend(self.ledger.list_batches(), remaining_protein),
        )

    def live(self) -> LiveQuery[DashboardSnapshot]:
        """Return today's snapshot as a value that refreshes on writes."""
        return LiveQuery.bind(self.feed, WATCHED_COLLECTIONS, self.build)


def _percent(consumed: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(consumed / target * 100, 100.0)
