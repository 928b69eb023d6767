"""Composition session bookkeeping for the in-progress pot."""

from dataclasses import dataclass, field, replace
from uuid import UUID, uuid4

from macro_prep.domain.catalog import CatalogEntry, MeasureKind
from macro_prep.domain.composition import CompositionEntry, CompositionSession
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.errors import NotFoundError
from macro_prep.services.catalog import CatalogService
from macro_prep.services.ledger import ConsumptionLedger

DEFAULT_MASS_QUANTITY = 100.0
DEFAULT_PIECE_QUANTITY = 1.0
SEARCH_LIMIT = 10


@dataclass(frozen=True)
class SearchHit:
    """A fridge batch or catalog entry matching a pot search."""

    id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    in_fridge: bool
    current_mass: float | None = None


@dataclass
class SessionRegistry:
    """Holds open sessions until they are promoted, logged or discarded."""

    sessions: dict[UUID, CompositionSession] = field(default_factory=dict)

    def open(self, session: CompositionSession | None = None) -> CompositionSession:
        """Register a new (or given) session and return it."""
        opened = session or CompositionSession()
        self.sessions[opened.id] = opened
        return opened

    def get(self, session_id: UUID) -> CompositionSession:
        """Return an open session or raise NotFoundError."""
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def close(self, session_id: UUID) -> None:
        """Release a session."""
        self.sessions.pop(session_id, None)


@dataclass
class CompositionService:
    """Adds, edits and removes pot entries."""

    catalog_service: CatalogService
    ledger: ConsumptionLedger

    def add_catalog_entry(
        self, session: CompositionSession, catalog_id: UUID
    ) -> CompositionEntry:
        """Snapshot a catalog entry into the session at its default quantity."""
        entry = entry_from_catalog(self.catalog_service.get(catalog_id))
        session.entries.append(entry)
        return entry

    def add_batch_entry(
        self, session: CompositionSession, batch_id: UUID
    ) -> CompositionEntry:
        """Snapshot a fridge batch into the session at 100 g."""
        entry = entry_from_batch(self.ledger.get_batch(batch_id))
        session.entries.append(entry)
        return entry

    def set_quantity(
        self, session: CompositionSession, entry_id: UUID, quantity: object
    ) -> CompositionEntry:
        """Change an entry's quantity; invalid values aggregate as zero."""
        index = _index_of(session, entry_id)
        updated = replace(session.entries[index], quantity=quantity)
        session.entries[index] = updated
        return updated

    def remove_entry(self, session: CompositionSession, entry_id: UUID) -> None:
        """Remove an entry from the session."""
        del session.entries[_index_of(session, entry_id)]

    def search(self, query: str) -> list[SearchHit]:
        """Search fridge batches first, then the catalog, unique by name."""
        if not query:
            return []
        needle = query.lower()
        hits = [
            _hit_from_batch(batch)
            for batch in self.ledger.list_batches()
            if needle in batch.name.lower()
        ]
        hits.extend(
            _hit_from_catalog(entry)
            for entry in self.catalog_service.search(query, limit=SEARCH_LIMIT)
        )
        seen: set[str] = set()
        unique: list[SearchHit] = []
        for hit in hits:
            if hit.name in seen:
                continue
            seen.add(hit.name)
            unique.append(hit)
        return unique[:SEARCH_LIMIT]


def entry_from_catalog(entry: CatalogEntry) -> CompositionEntry:
    """Snapshot a catalog entry as a session entry."""
    return CompositionEntry(
        id=uuid4(),
        name=entry.name,
        calories=entry.calories,
        protein=entry.protein,
        carbs=entry.carbs,
        fat=entry.fat,
        measure_kind=entry.measure_kind,
        quantity=(
            DEFAULT_PIECE_QUANTITY
            if entry.measure_kind == MeasureKind.PIECE
            else DEFAULT_MASS_QUANTITY
        ),
        mass_per_piece=entry.mass_per_piece,
        catalog_id=entry.id,
    )


def entry_from_batch(batch: InventoryBatch) -> CompositionEntry:
    """Snapshot a fridge batch as a session entry."""
    return CompositionEntry(
        id=uuid4(),
        name=batch.name,
        calories=batch.calories,
        protein=batch.protein,
        carbs=batch.carbs,
        fat=batch.fat,
        measure_kind=MeasureKind.MASS,
        quantity=DEFAULT_MASS_QUANTITY,
        batch_id=batch.id,
    )


def _index_of(session: CompositionSession, entry_id: UUID) -> int:
    for index, entry in enumerate(session.entries):
        if entry.id == entry_id:
            return index
    raise NotFoundError(f"Entry {entry_id} not in session")


def _hit_from_batch(batch: InventoryBatch) -> SearchHit:
    return SearchHit(
        id=batch.id,
        name=batch.name,
        calories=batch.calories,
        protein=batch.protein,
        carbs=batch.carbs,
        fat=batch.fat,
        in_fridge=True,
        current_mass=batch.current_mass,
    )


def _hit_from_catalog(entry: CatalogEntry) -> SearchHit:
    return SearchHit(
        id=entry.id,
        name=entry.name,
        calories=entry.calories,
        protein=entry.protein,
        carbs=entry.carbs,
        fat=entry.fat,
        in_fridge=False,
    )
