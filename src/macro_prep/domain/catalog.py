"""Domain models for the ingredient catalog."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class MeasureKind(StrEnum):
    """How quantities of an ingredient are measured."""

    MASS = "mass"
    VOLUME = "volume"
    PIECE = "piece"


@dataclass(frozen=True)
class CatalogEntry:
    """Static nutrient facts for an ingredient.

    Nutrient fields are per 100 g/ml for mass and volume entries and per
    piece for piece entries.
    """

    id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    measure_kind: MeasureKind
    category: str = "other"
    mass_per_piece: float | None = None
