"""Domain models for the consumption log."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class ConsumptionRecord:
    """A logged consumption event."""

    id: UUID
    date: date
    name: str
    mass_consumed: float
    calories: float
    protein: float
    carbs: float
    fat: float
    timestamp: datetime
    source_batch_id: UUID | None = None


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    calories: float
    protein: float
    carbs: float
    fat: float
