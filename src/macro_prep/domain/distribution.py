"""Domain models for portion distribution results."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class DistributionMode(StrEnum):
    """Direction of the weight/nutrient solver."""

    SCALE = "scale"
    GOAL = "goal"


class LimitAxis(StrEnum):
    """Quantity whose ceiling was exceeded."""

    MASS = "mass"
    PROTEIN = "protein"


@dataclass(frozen=True)
class PortionSource:
    """Nutrients available in `reference_mass` units, capped at `ceiling`.

    For a finished session the reference is the whole finished mass; for an
    inventory batch the reference is 100 units of its per-100 densities.
    """

    name: str
    reference_mass: float
    calories: float
    protein: float
    carbs: float
    fat: float
    ceiling: float
    batch_id: UUID | None = None


@dataclass(frozen=True)
class LimitExceeded:
    """A resolved portion surpasses what is available."""

    axis: LimitAxis
    ceiling: int
    available_protein: int


@dataclass(frozen=True)
class SplitAdvice:
    """Advisory split of a large portion."""

    count: int
    portion_mass: int


@dataclass(frozen=True)
class Portion:
    """Solved portion with rounded mass and nutrients."""

    mode: DistributionMode
    mass: int
    calories: int
    protein: int
    carbs: int
    fat: int
    limit: LimitExceeded | None = None
    split: SplitAdvice | None = None
    no_solution: bool = False

    @property
    def committable(self) -> bool:
        """True when the portion can be written to the log."""
        return self.limit is None and not self.no_solution and self.mass > 0


@dataclass(frozen=True)
class Recommendation:
    """Strategy advice for closing a protein deficit."""

    batch_id: UUID
    name: str
    mass: int
    protein: int
    partial: bool
    split: SplitAdvice | None
