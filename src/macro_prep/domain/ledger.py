"""Write operations applied atomically to the fridge and log collections."""

from dataclasses import dataclass
from uuid import UUID

from macro_prep.domain.consumption import ConsumptionRecord
from macro_prep.domain.inventory import InventoryBatch


@dataclass(frozen=True)
class InsertRecord:
    """Add a consumption record to the log."""

    record: ConsumptionRecord


@dataclass(frozen=True)
class DeleteRecord:
    """Remove a consumption record from the log."""

    record_id: UUID


@dataclass(frozen=True)
class InsertBatch:
    """Add an inventory batch to the fridge."""

    batch: InventoryBatch


@dataclass(frozen=True)
class SetBatchMass:
    """Overwrite the current mass of a fridge batch."""

    batch_id: UUID
    current_mass: float


@dataclass(frozen=True)
class DeleteBatch:
    """Remove a batch from the fridge."""

    batch_id: UUID


LedgerWrite = InsertRecord | DeleteRecord | InsertBatch | SetBatchMass | DeleteBatch


def touched_collections(writes: list[LedgerWrite]) -> set[str]:
    """Return the collection names a list of writes modifies."""
    collections: set[str] = set()
    for write in writes:
        if isinstance(write, InsertRecord | DeleteRecord):
            collections.add("logs")
        else:
            collections.add("fridge")
    return collections
