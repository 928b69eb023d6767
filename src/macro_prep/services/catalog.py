"""Services for managing the ingredient catalog."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from macro_prep.domain.catalog import CatalogEntry, MeasureKind
from macro_prep.errors import DuplicateNameError, NotFoundError
from macro_prep.services.events import ChangeFeed

_logger = logging.getLogger(__name__)

# name, calories, protein, carbs, fat, category, measure, mass per piece
DefaultRow = tuple[str, float, float, float, float, str, str, float | None]

DEFAULT_INGREDIENTS: list[DefaultRow] = [
    ("Chicken Breast (Raw)", 110, 23, 0, 1.2, "protein", "mass", None),
    ("Chicken Thigh (Raw)", 177, 20, 0, 10, "protein", "mass", None),
    ("Ground Beef (90/10)", 217, 26, 0, 12, "protein", "mass", None),
    ("Ground Beef (80/20)", 254, 17, 0, 20, "protein", "mass", None),
    ("Steak (Sirloin)", 244, 27, 0, 14, "protein", "mass", None),
    ("Salmon (Raw)", 208, 20, 0, 13, "protein", "mass", None),
    ("White Fish (Cod/Tilapia)", 82, 18, 0, 0.7, "protein", "mass", None),
    ("Tuna (Canned in Water)", 116, 26, 0, 1, "protein", "mass", None),
    ("Shrimp (Raw)", 99, 24, 0.2, 0.3, "protein", "mass", None),
    ("Pork Chop (Lean)", 143, 26, 0, 3.5, "protein", "mass", None),
    ("Turkey Breast", 135, 30, 0, 1, "protein", "mass", None),
    ("Egg (Large)", 72, 6.3, 0.4, 5, "protein", "piece", 50),
    ("Egg White", 17, 3.6, 0.2, 0, "protein", "piece", 33),
    ("Tofu (Firm)", 144, 17, 3, 9, "protein", "mass", None),
    ("Tempeh", 192, 20, 7.6, 11, "protein", "mass", None),
    ("Lentils (Dry)", 352, 25, 63, 1, "protein", "mass", None),
    ("Chickpeas (Canned)", 139, 7, 23, 2, "protein", "mass", None),
    ("Whey Protein (Standard)", 390, 78, 6, 6, "protein", "mass", None),
    ("Whey Isolate", 370, 90, 1, 1, "protein", "mass", None),
    ("Casein Protein", 360, 75, 4, 2, "protein", "mass", None),
    ("Pea Protein (Vegan)", 380, 75, 3, 6, "protein", "mass", None),
    ("Creatine Monohydrate", 0, 0, 0, 0, "other", "mass", None),
    ("Almonds (Raw)", 579, 21, 22, 50, "fat", "mass", None),
    ("Walnuts", 654, 15, 14, 65, "fat", "mass", None),
    ("Pistachios", 560, 20, 28, 45, "fat", "mass", None),
    ("Cashews", 553, 18, 30, 44, "fat", "mass", None),
    ("Peanuts", 567, 26, 16, 49, "fat", "mass", None),
    ("Pumpkin Seeds", 559, 30, 10, 49, "fat", "mass", None),
    ("Chia Seeds", 486, 17, 42, 31, "fat", "mass", None),
    ("Dates (Medjool)", 277, 1.8, 75, 0.2, "carb", "piece", 24),
    ("Raisins", 299, 3, 79, 0.5, "carb", "mass", None),
    ("White Rice (Raw)", 365, 7, 80, 0.7, "carb", "mass", None),
    ("Brown Rice (Raw)", 367, 7.5, 76, 3.2, "carb", "mass", None),
    ("Basmati Rice (Raw)", 350, 9, 78, 0.5, "carb", "mass", None),
    ("Oats (Rolled)", 379, 13, 68, 6.5, "carb", "mass", None),
    ("Pasta (Semolina)", 371, 13, 75, 1.5, "carb", "mass", None),
    ("Quinoa (Raw)", 368, 14, 64, 6, "carb", "mass", None),
    ("Potato (White, Raw)", 77, 2, 17, 0.1, "carb", "mass", None),
    ("Sweet Potato (Raw)", 86, 1.6, 20, 0.1, "carb", "mass", None),
    ("Slice of Bread (White)", 79, 2.7, 15, 1, "carb", "piece", 30),
    ("Slice of Bread (Whole Wheat)", 81, 4, 14, 1, "carb", "piece", 33),
    ("Tortilla (Flour, Medium)", 140, 4, 24, 3.5, "carb", "piece", 45),
    ("Bagel (Plain)", 250, 10, 49, 1.5, "carb", "piece", 95),
    ("Olive Oil", 884, 0, 0, 100, "fat", "volume", None),
    ("Coconut Oil", 862, 0, 0, 100, "fat", "mass", None),
    ("Butter", 717, 0.9, 0.1, 81, "fat", "mass", None),
    ("Avocado", 160, 2, 8.5, 15, "fat", "mass", None),
    ("Peanut Butter", 588, 25, 20, 50, "fat", "mass", None),
    ("Whole Milk", 61, 3.2, 4.8, 3.3, "other", "volume", None),
    ("Skim Milk (0%)", 34, 3.4, 5, 0.1, "other", "volume", None),
    ("Almond Milk (Unsweetened)", 13, 0.4, 0.1, 1.1, "other", "volume", None),
    ("Oat Milk", 45, 0.8, 8, 1.5, "other", "volume", None),
    ("Greek Yogurt (0% Fat)", 59, 10, 3.6, 0.4, "protein", "mass", None),
    ("Cheddar Cheese", 402, 25, 1.3, 33, "fat", "mass", None),
    ("Mozzarella (Low Moisture)", 300, 22, 2, 22, "fat", "mass", None),
    ("Cottage Cheese (Low Fat)", 72, 12, 3, 1, "protein", "mass", None),
    ("Banana (Medium)", 105, 1.3, 27, 0.4, "carb", "piece", 118),
    ("Apple (Medium)", 95, 0.5, 25, 0.3, "carb", "piece", 182),
    ("Orange", 62, 1.2, 15, 0.2, "carb", "piece", 130),
    ("Blueberries", 57, 0.7, 14, 0.3, "carb", "mass", None),
    ("Strawberries", 32, 0.7, 7.7, 0.3, "carb", "mass", None),
    ("Broccoli", 34, 2.8, 7, 0.4, "veg", "mass", None),
    ("Spinach (Raw)", 23, 2.9, 3.6, 0.4, "veg", "mass", None),
    ("Carrots", 41, 0.9, 10, 0.2, "veg", "mass", None),
    ("Onion", 40, 1.1, 9, 0.1, "veg", "mass", None),
    ("Red Bell Pepper", 31, 1, 6, 0.3, "veg", "mass", None),
    ("Tomato", 18, 0.9, 3.9, 0.2, "veg", "mass", None),
    ("Cucumber", 15, 0.7, 3.6, 0.1, "veg", "mass", None),
    ("Green Beans", 31, 1.8, 7, 0.2, "veg", "mass", None),
    ("Mushrooms", 22, 3.1, 3.3, 0.3, "veg", "mass", None),
    ("Honey", 304, 0.3, 82, 0, "carb", "mass", None),
    ("Maple Syrup", 260, 0, 67, 0, "carb", "volume", None),
    ("Soy Sauce", 53, 8, 5, 0, "other", "volume", None),
    ("Mayonnaise", 680, 1, 1, 75, "fat", "mass", None),
    ("Ketchup", 111, 1, 26, 0, "carb", "mass", None),
]


class CatalogRepository(Protocol):
    """Persistence interface for catalog entries."""

    def list_entries(self) -> list[CatalogEntry]:
        """Return every catalog entry."""

    def search_entries(self, query: str, limit: int) -> list[CatalogEntry]:
        """Return entries whose name contains the query, ignoring case."""

    def get_entry(self, entry_id: UUID) -> CatalogEntry | None:
        """Return an entry by id, if present."""

    def create_entries(self, entries: list[CatalogEntry]) -> None:
        """Insert new entries."""

    def update_entry(self, entry: CatalogEntry) -> None:
        """Replace an existing entry."""

    def delete_entry(self, entry_id: UUID) -> None:
        """Delete an entry."""


@dataclass
class CatalogService:
    """Application service for catalog operations."""

    repository: CatalogRepository
    feed: ChangeFeed

    def search(self, query: str | None, limit: int = 20) -> list[CatalogEntry]:
        """Search by name, listing everything when the query is empty."""
        if not query:
            return self.repository.list_entries()[:limit]
        return self.repository.search_entries(query, limit)

    def get(self, entry_id: UUID) -> CatalogEntry:
        """Return an entry or raise NotFoundError."""
        entry = self.repository.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(f"Ingredient {entry_id} not found")
        return entry

    def create(self, payload: dict[str, object]) -> CatalogEntry:
        """Validate and insert a new entry."""
        entry = build_entry(uuid4(), payload)
        self._ensure_unique_name(entry)
        self.repository.create_entries([entry])
        self.feed.publish(["ingredients"])
        return entry

    def update(self, entry_id: UUID, payload: dict[str, object]) -> CatalogEntry:
        """Apply changed fields to an entry."""
        current = self.get(entry_id)
        merged = {
            "name": current.name,
            "calories": current.calories,
            "protein": current.protein,
            "carbs": current.carbs,
            "fat": current.fat,
            "category": current.category,
            "measure_kind": current.measure_kind,
            "mass_per_piece": current.mass_per_piece,
            **{key: value for key, value in payload.items() if value is not None},
        }
        entry = build_entry(current.id, merged)
        self._ensure_unique_name(entry)
        self.repository.update_entry(entry)
        self.feed.publish(["ingredients"])
        return entry

    def delete(self, entry_id: UUID) -> None:
        """Delete an entry."""
        self.get(entry_id)
        self.repository.delete_entry(entry_id)
        self.feed.publish(["ingredients"])

    def seed_defaults(self) -> int:
        """Add default ingredients whose names are not in the catalog yet."""
        existing = {entry.name.lower() for entry in self.repository.list_entries()}
        missing = [
            _default_entry(row)
            for row in DEFAULT_INGREDIENTS
            if row[0].lower() not in existing
        ]
        if missing:
            self.repository.create_entries(missing)
            self.feed.publish(["ingredients"])
            _logger.info("Seeded %s default ingredients", len(missing))
        return len(missing)

    def _ensure_unique_name(self, entry: CatalogEntry) -> None:
        name = entry.name.lower()
        for other in self.repository.list_entries():
            if other.id != entry.id and other.name.lower() == name:
                raise DuplicateNameError(f"Ingredient {entry.name!r} already exists")


def build_entry(entry_id: UUID, payload: dict[str, object]) -> CatalogEntry:
    """Build a catalog entry from a payload, validating piece measures."""
    name = str(payload.get("name") or "").strip()
    if not name:
        raise ValueError("Ingredient name is required")
    measure_kind = MeasureKind(str(payload.get("measure_kind") or MeasureKind.MASS))
    mass_per_piece = payload.get("mass_per_piece")
    if measure_kind == MeasureKind.PIECE:
        if not isinstance(mass_per_piece, int | float) or mass_per_piece <= 0:
            raise ValueError("Piece ingredients need a positive mass per piece")
        mass_per_piece = float(mass_per_piece)
    else:
        mass_per_piece = None
    return CatalogEntry(
        id=entry_id,
        name=name,
        calories=float(payload.get("calories") or 0.0),
        protein=float(payload.get("protein") or 0.0),
        carbs=float(payload.get("carbs") or 0.0),
        fat=float(payload.get("fat") or 0.0),
        measure_kind=measure_kind,
        category=str(payload.get("category") or "other"),
        mass_per_piece=mass_per_piece,
    )


def _default_entry(row: DefaultRow) -> CatalogEntry:
    name, calories, protein, carbs, fat, category, measure, per_piece = row
    return build_entry(
        uuid4(),
        {
            "name": name,
            "calories": calories,
            "protein": protein,
            "carbs": carbs,
            "fat": fat,
            "category": category,
            "measure_kind": measure,
            "mass_per_piece": per_piece,
        },
    )
