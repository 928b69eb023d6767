"""Consumption ledger: atomic depletion and refund across fridge and logs."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from macro_prep.domain.composition import CompositionSession
from macro_prep.domain.consumption import ConsumptionRecord
from macro_prep.domain.distribution import DistributionMode, Portion
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.domain.ledger import (
    DeleteBatch,
    DeleteRecord,
    InsertBatch,
    InsertRecord,
    LedgerWrite,
    SetBatchMass,
    touched_collections,
)
from macro_prep.errors import (
    InsufficientInventoryError,
    InvalidPortionError,
    LedgerError,
    NoSolutionError,
    NotFoundError,
    TransactionFailedError,
)
from macro_prep.services.aggregator import aggregate, quantity_value, round_half_up
from macro_prep.services.distribution import (
    distribute,
    source_from_batch,
    source_from_session,
)
from macro_prep.services.events import ChangeFeed

_logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    """Persistence interface for the fridge and log collections."""

    def list_batches(self) -> list[InventoryBatch]:
        """Return all fridge batches in creation order."""

    def get_batch(self, batch_id: UUID) -> InventoryBatch | None:
        """Return a batch by id, if present."""

    def list_records(self, on_date: date | None = None) -> list[ConsumptionRecord]:
        """Return log records, optionally limited to one day."""

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        """Return a log record by id, if present."""

    def apply(self, writes: list[LedgerWrite]) -> None:
        """Apply all writes or none of them."""


@dataclass
class ConsumptionLedger:
    """Service owning every write to the fridge and log collections."""

    store: LedgerStore
    feed: ChangeFeed

    def list_batches(self) -> list[InventoryBatch]:
        """Return current fridge contents."""
        return self.store.list_batches()

    def get_batch(self, batch_id: UUID) -> InventoryBatch:
        """Return a batch or raise NotFoundError."""
        batch = self.store.get_batch(batch_id)
        if batch is None:
            raise NotFoundError(f"Batch {batch_id} not found")
        return batch

    def list_records(self, on_date: date | None = None) -> list[ConsumptionRecord]:
        """Return log records, optionally for a single day."""
        return self.store.list_records(on_date)

    def portion_from_batch(
        self, batch_id: UUID, mode: DistributionMode, target: object
    ) -> Portion:
        """Solve a portion against one fridge batch."""
        return distribute(source_from_batch(self.get_batch(batch_id)), mode, target)

    def consume_from_batch(
        self,
        batch_id: UUID,
        mode: DistributionMode,
        target: object,
        on_date: date,
    ) -> ConsumptionRecord:
        """Solve a portion from a batch and log it, depleting the batch."""
        batch = self.get_batch(batch_id)
        portion = distribute(source_from_batch(batch), mode, target)
        return self.commit_consumption(
            name=batch.name,
            portion=portion,
            source_batch_id=batch.id,
            on_date=on_date,
        )

    def commit_consumption(
        self,
        name: str,
        portion: Portion,
        source_batch_id: UUID | None,
        on_date: date,
    ) -> ConsumptionRecord:
        """Log a portion and deplete its source batch in one atomic write."""
        _check_portion(portion)
        record = _build_record(name, portion, source_batch_id, on_date)
        writes: list[LedgerWrite] = [InsertRecord(record)]
        if source_batch_id is not None:
            batch = self.get_batch(source_batch_id)
            # Portion masses are whole grams; a rounded-up remainder empties the batch.
            if portion.mass > round_half_up(batch.current_mass):
                raise InsufficientInventoryError(
                    f"Only {batch.current_mass:g} left of {batch.name}",
                    ceiling=batch.current_mass,
                )
            writes.append(_deplete(batch, portion.mass))
        self._apply(writes)
        _logger.info(
            "Logged %s: mass=%s source=%s",
            record.name,
            record.mass_consumed,
            source_batch_id,
        )
        return record

    def consume_session(
        self, session: CompositionSession, portion: Portion, on_date: date
    ) -> ConsumptionRecord:
        """Log a portion of a session and deplete every linked batch.

        Each linked entry is deducted by its own quantity. The record keeps
        only the first linked batch, so a refund restores that batch alone.
        """
        _check_portion(portion)
        if not session.entries:
            raise InvalidPortionError("Session has no entries")
        linked = [entry for entry in session.entries if entry.batch_id is not None]
        source_batch_id = linked[0].batch_id if linked else None
        name = source_from_session(session).name
        record = _build_record(name, portion, source_batch_id, on_date)
        writes: list[LedgerWrite] = [InsertRecord(record)]
        # None marks a batch that this session empties.
        depleted: dict[UUID, InventoryBatch | None] = {}
        for entry in linked:
            if entry.batch_id is None:
                continue
            if entry.batch_id in depleted:
                batch = depleted[entry.batch_id]
            else:
                batch = self.store.get_batch(entry.batch_id)
            if batch is None:
                _logger.warning(
                    "Skipping depletion of missing batch %s", entry.batch_id
                )
                continue
            write = _deplete(batch, quantity_value(entry.quantity))
            depleted[batch.id] = (
                _with_mass(batch, write.current_mass)
                if isinstance(write, SetBatchMass)
                else None
            )
        for batch_id, batch in depleted.items():
            if batch is None:
                writes.append(DeleteBatch(batch_id))
            else:
                writes.append(SetBatchMass(batch_id, batch.current_mass))
        self._apply(writes)
        session.clear()
        _logger.info("Logged session %s: mass=%s", record.name, record.mass_consumed)
        return record

    def promote_session(
        self, session: CompositionSession, finished_mass: object, name: str
    ) -> InventoryBatch:
        """Store a cooked session in the fridge as a new batch."""
        finished = quantity_value(finished_mass)
        if finished <= 0:
            raise InvalidPortionError("Finished mass must be positive")
        if not name or not name.strip():
            raise ValueError("Batch name is required")
        totals = aggregate(session)
        batch = InventoryBatch(
            id=uuid4(),
            name=name.strip(),
            calories=totals.calories / finished * 100,
            protein=totals.protein / finished * 100,
            carbs=totals.carbs / finished * 100,
            fat=totals.fat / finished * 100,
            total_mass=finished,
            current_mass=finished,
            created_at=datetime.now(tz=UTC),
        )
        self._apply([InsertBatch(batch)])
        session.clear()
        _logger.info("Promoted session to batch %s (%s)", batch.name, finished)
        return batch

    def refund(self, record_id: UUID) -> InventoryBatch | None:
        """Delete a log record and return its mass to the source batch."""
        record = self.store.get_record(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found")
        writes: list[LedgerWrite] = []
        restored: InventoryBatch | None = None
        if record.source_batch_id is not None:
            batch = self.store.get_batch(record.source_batch_id)
            if record.mass_consumed <= 0:
                _logger.warning("Record %s has no mass to refund", record.id)
            elif batch is None:
                restored = _recreate_batch(record, record.source_batch_id)
                writes.append(InsertBatch(restored))
                _logger.warning(
                    "Recreating deleted batch %s at refunded mass %s",
                    record.source_batch_id,
                    record.mass_consumed,
                )
            else:
                new_mass = batch.current_mass + record.mass_consumed
                if new_mass > batch.total_mass:
                    _logger.warning(
                        "Refund of %s clamped to total mass %s",
                        batch.name,
                        batch.total_mass,
                    )
                    new_mass = batch.total_mass
                restored = _with_mass(batch, new_mass)
                writes.append(SetBatchMass(batch.id, new_mass))
        writes.append(DeleteRecord(record.id))
        self._apply(writes)
        _logger.info("Refunded record %s", record.id)
        return restored

    def discard_batch(self, batch_id: UUID) -> None:
        """Throw a batch away without logging it."""
        batch = self.get_batch(batch_id)
        self._apply([DeleteBatch(batch.id)])
        _logger.info("Discarded batch %s", batch.name)

    def _apply(self, writes: list[LedgerWrite]) -> None:
        try:
            self.store.apply(writes)
        except LedgerError:
            raise
        except Exception as exc:
            _logger.exception("Ledger write failed; nothing applied")
            raise TransactionFailedError("Ledger write failed") from exc
        self.feed.publish(touched_collections(writes))


def _check_portion(portion: Portion) -> None:
    if portion.no_solution:
        raise NoSolutionError("Source has no protein to solve against")
    if portion.limit is not None:
        raise InsufficientInventoryError(
            f"Portion exceeds the available {portion.limit.ceiling}",
            ceiling=portion.limit.ceiling,
        )
    if portion.mass <= 0:
        raise InvalidPortionError("Consumed mass must be positive")


def _build_record(
    name: str, portion: Portion, source_batch_id: UUID | None, on_date: date
) -> ConsumptionRecord:
    return ConsumptionRecord(
        id=uuid4(),
        date=on_date,
        name=name,
        mass_consumed=portion.mass,
        calories=portion.calories,
        protein=portion.protein,
        carbs=portion.carbs,
        fat=portion.fat,
        timestamp=datetime.now(tz=UTC),
        source_batch_id=source_batch_id,
    )


def _deplete(batch: InventoryBatch, mass: float) -> LedgerWrite:
    new_mass = batch.current_mass - mass
    if new_mass <= 0:
        return DeleteBatch(batch.id)
    return SetBatchMass(batch.id, new_mass)


def _with_mass(batch: InventoryBatch, current_mass: float) -> InventoryBatch:
    return InventoryBatch(
        id=batch.id,
        name=batch.name,
        calories=batch.calories,
        protein=batch.protein,
        carbs=batch.carbs,
        fat=batch.fat,
        total_mass=batch.total_mass,
        current_mass=current_mass,
        created_at=batch.created_at,
    )


def _recreate_batch(record: ConsumptionRecord, batch_id: UUID) -> InventoryBatch:
    mass = record.mass_consumed
    return InventoryBatch(
        id=batch_id,
        name=record.name,
        calories=record.calories / mass * 100,
        protein=record.protein / mass * 100,
        carbs=record.carbs / mass * 100,
        fat=record.fat / mass * 100,
        total_mass=mass,
        current_mass=mass,
        created_at=datetime.now(tz=UTC),
    )
