"""Domain models for composition sessions and recipe templates."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from macro_prep.domain.catalog import MeasureKind


@dataclass(frozen=True)
class CompositionEntry:
    """Snapshot of an ingredient or inventory batch placed in a session."""

    id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    measure_kind: MeasureKind
    quantity: object
    mass_per_piece: float | None = None
    catalog_id: UUID | None = None
    batch_id: UUID | None = None

    def __post_init__(self) -> None:
        if self.catalog_id is not None and self.batch_id is not None:
            raise ValueError("Entry cannot reference both a catalog entry and a batch")


@dataclass
class CompositionSession:
    """In-progress mix of entries, held in memory until promoted or logged."""

    id: UUID = field(default_factory=uuid4)
    entries: list[CompositionEntry] = field(default_factory=list)
    finished_mass: float | None = None
    name: str | None = None

    def clear(self) -> None:
        """Drop all entries and the finished mass."""
        self.entries.clear()
        self.finished_mass = None
        self.name = None


@dataclass(frozen=True)
class MacroTotals:
    """Unrounded aggregate of a session."""

    total_mass: float
    calories: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class Recipe:
    """Reusable template of session entries."""

    id: UUID
    name: str
    entries: list[CompositionEntry]
    default_finished_mass: float | None = None
