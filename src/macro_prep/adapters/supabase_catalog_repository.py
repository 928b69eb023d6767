"""Supabase implementation for the ingredient catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from macro_prep.domain.catalog import CatalogEntry, MeasureKind
from macro_prep.services.catalog import CatalogRepository


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase-backed repository for catalog entries."""

    client: Client

    def list_entries(self) -> list[CatalogEntry]:
        """Return every catalog entry ordered by name."""
        response = self.client.table("ingredients").select("*").order("name").execute()
        return [_parse_entry(row) for row in response.data or []]

    def search_entries(self, query: str, limit: int) -> list[CatalogEntry]:
        """Search entries by name."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .ilike("name", f"%{query}%")
            .order("name")
            .limit(limit)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def get_entry(self, entry_id: UUID) -> CatalogEntry | None:
        """Return an entry by id, if present."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", str(entry_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def create_entries(self, entries: list[CatalogEntry]) -> None:
        """Insert entries in one request."""
        if not entries:
            return
        self.client.table("ingredients").insert(
            [_entry_payload(entry) for entry in entries]
        ).execute()

    def update_entry(self, entry: CatalogEntry) -> None:
        """Overwrite an entry's fields."""
        payload = _entry_payload(entry)
        payload.pop("id")
        response = (
            self.client.table("ingredients")
            .update(payload)
            .eq("id", str(entry.id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update ingredient")

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry."""
        self.client.table("ingredients").delete().eq("id", str(entry_id)).execute()


def _entry_payload(entry: CatalogEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "name": entry.name,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fat": entry.fat,
        "category": entry.category,
        "measure_kind": entry.measure_kind.value,
        "mass_per_piece": entry.mass_per_piece,
    }


def _parse_entry(row: dict[str, object]) -> CatalogEntry:
    """Parse an ingredient row into a domain model."""
    mass_per_piece = row.get("mass_per_piece")
    return CatalogEntry(
        id=UUID(str(row["id"])),
        name=str(row.get("name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        measure_kind=MeasureKind(str(row.get("measure_kind") or MeasureKind.MASS)),
        category=str(row.get("category") or "other"),
        mass_per_piece=float(mass_per_piece) if mass_per_piece is not None else None,
    )
