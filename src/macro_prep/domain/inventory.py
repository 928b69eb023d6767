"""Domain models for fridge inventory."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class InventoryBatch:
    """A physical, depletable batch of prepared or purchased food.

    Densities are always per 100 mass units.
    """

    id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    total_mass: float
    current_mass: float
    created_at: datetime

    @property
    def percent_remaining(self) -> float:
        """Share of the original batch still on hand."""
        if self.total_mass <= 0:
            return 0.0
        return min(self.current_mass / self.total_mass * 100, 100.0)
