"""Supabase repository for fridge batches and the consumption log."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from macro_prep.domain.consumption import ConsumptionRecord
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.domain.ledger import (
    DeleteBatch,
    DeleteRecord,
    InsertBatch,
    InsertRecord,
    LedgerWrite,
    SetBatchMass,
)
from macro_prep.services.ledger import LedgerStore
from macro_prep.services.stats import StatsRepository

APPLY_FUNCTION = "apply_ledger_writes"


@dataclass
class SupabaseLedgerRepository(LedgerStore, StatsRepository):
    """Supabase implementation of the ledger store.

    Reads go straight to the `fridge` and `logs` tables. Writes are sent as a
    single call to a database function so they commit in one transaction.
    """

    client: Client

    def list_batches(self) -> list[InventoryBatch]:
        """Return fridge batches in creation order."""
        response = (
            self.client.table("fridge")
            .select("*")
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_batch(row) for row in response.data or []]

    def get_batch(self, batch_id: UUID) -> InventoryBatch | None:
        """Return a batch by id, if present."""
        response = (
            self.client.table("fridge")
            .select("*")
            .eq("id", str(batch_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_batch(response.data[0])

    def list_records(self, on_date: date | None = None) -> list[ConsumptionRecord]:
        """Return log records newest first, optionally for one day."""
        query = self.client.table("logs").select("*")
        if on_date is not None:
            query = query.eq("date", on_date.isoformat())
        response = query.order("timestamp", desc=True).execute()
        return [_parse_record(row) for row in response.data or []]

    def list_records_between(self, start: date, end: date) -> list[ConsumptionRecord]:
        """Return records dated in [start, end)."""
        response = (
            self.client.table("logs")
            .select("*")
            .gte("date", start.isoformat())
            .lt("date", end.isoformat())
            .order("date", desc=False)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        """Return a record by id, if present."""
        response = (
            self.client.table("logs")
            .select("*")
            .eq("id", str(record_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_record(response.data[0])

    def apply(self, writes: list[LedgerWrite]) -> None:
        """Apply writes in one database transaction."""
        if not writes:
            return
        self.client.rpc(
            APPLY_FUNCTION, {"p_writes": [write_payload(write) for write in writes]}
        ).execute()


def write_payload(write: LedgerWrite) -> dict[str, object]:
    """Serialize one ledger write for the database function."""
    if isinstance(write, InsertRecord):
        return {"op": "insert_record", "row": record_row(write.record)}
    if isinstance(write, DeleteRecord):
        return {"op": "delete_record", "id": str(write.record_id)}
    if isinstance(write, InsertBatch):
        return {"op": "insert_batch", "row": batch_row(write.batch)}
    if isinstance(write, SetBatchMass):
        return {
            "op": "set_batch_mass",
            "id": str(write.batch_id),
            "current_mass": write.current_mass,
        }
    if isinstance(write, DeleteBatch):
        return {"op": "delete_batch", "id": str(write.batch_id)}
    raise TypeError(f"Unsupported ledger write: {write!r}")


def batch_row(batch: InventoryBatch) -> dict[str, object]:
    """Serialize a batch as a `fridge` row."""
    return {
        "id": str(batch.id),
        "name": batch.name,
        "calories": batch.calories,
        "protein": batch.protein,
        "carbs": batch.carbs,
        "fat": batch.fat,
        "total_mass": batch.total_mass,
        "current_mass": batch.current_mass,
        "created_at": batch.created_at.isoformat(),
    }


def record_row(record: ConsumptionRecord) -> dict[str, object]:
    """Serialize a record as a `logs` row."""
    return {
        "id": str(record.id),
        "date": record.date.isoformat(),
        "name": record.name,
        "mass_consumed": record.mass_consumed,
        "calories": record.calories,
        "protein": record.protein,
        "carbs": record.carbs,
        "fat": record.fat,
        "timestamp": record.timestamp.isoformat(),
        "source_batch_id": (
            str(record.source_batch_id) if record.source_batch_id else None
        ),
    }


def _parse_batch(row: dict[str, object]) -> InventoryBatch:
    return InventoryBatch(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        total_mass=float(row.get("total_mass") or 0.0),
        current_mass=float(row.get("current_mass") or 0.0),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


def _parse_record(row: dict[str, object]) -> ConsumptionRecord:
    source_raw = row.get("source_batch_id")
    return ConsumptionRecord(
        id=UUID(str(row["id"])),
        date=date.fromisoformat(str(row["date"])),
        name=str(row.get("name", "")),
        mass_consumed=float(row.get("mass_consumed") or 0.0),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        timestamp=datetime.fromisoformat(str(row["timestamp"])),
        source_batch_id=UUID(str(source_raw)) if source_raw else None,
    )
