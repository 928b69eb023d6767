"""Models for the JSON backup file."""

import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from macro_prep.domain.catalog import CatalogEntry, MeasureKind
from macro_prep.domain.composition import CompositionEntry, Recipe
from macro_prep.domain.consumption import ConsumptionRecord
from macro_prep.domain.inventory import InventoryBatch
from macro_prep.domain.profile import Goal, UserProfile

BACKUP_VERSION = 9


class ProfileRow(BaseModel):
    """Stored user profile."""

    tdee: int
    target_calories: int = Field(gt=0)
    target_protein: int = Field(gt=0)
    goal: Goal

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileRow":
        return cls(
            tdee=profile.tdee,
            target_calories=profile.target_calories,
            target_protein=profile.target_protein,
            goal=profile.goal,
        )

    def to_profile(self) -> UserProfile:
        return UserProfile(
            tdee=self.tdee,
            target_calories=self.target_calories,
            target_protein=self.target_protein,
            goal=self.goal,
        )


class IngredientRow(BaseModel):
    """Stored catalog entry."""

    id: UUID
    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    category: str = "other"
    measure_kind: MeasureKind
    mass_per_piece: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _piece_needs_mass(self) -> "IngredientRow":
        if self.measure_kind == MeasureKind.PIECE and self.mass_per_piece is None:
            raise ValueError("piece ingredients need mass_per_piece")
        return self

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "IngredientRow":
        return cls(
            id=entry.id,
            name=entry.name,
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fat=entry.fat,
            category=entry.category,
            measure_kind=entry.measure_kind,
            mass_per_piece=entry.mass_per_piece,
        )

    def to_entry(self) -> CatalogEntry:
        return CatalogEntry(
            id=self.id,
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            measure_kind=self.measure_kind,
            category=self.category,
            mass_per_piece=self.mass_per_piece,
        )


class BatchRow(BaseModel):
    """Stored fridge batch."""

    id: UUID
    name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    total_mass: float = Field(gt=0)
    current_mass: float = Field(gt=0)
    created_at: dt.datetime

    @model_validator(mode="after")
    def _current_within_total(self) -> "BatchRow":
        if self.current_mass > self.total_mass:
            raise ValueError("current_mass exceeds total_mass")
        return self

    @classmethod
    def from_batch(cls, batch: InventoryBatch) -> "BatchRow":
        return cls(
            id=batch.id,
            name=batch.name,
            calories=batch.calories,
            protein=batch.protein,
            carbs=batch.carbs,
            fat=batch.fat,
            total_mass=batch.total_mass,
            current_mass=batch.current_mass,
            created_at=batch.created_at,
        )

    def to_batch(self) -> InventoryBatch:
        return InventoryBatch(
            id=self.id,
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            total_mass=self.total_mass,
            current_mass=self.current_mass,
            created_at=self.created_at,
        )


class EntryRow(BaseModel):
    """Stored recipe entry."""

    id: UUID
    name: str
    calories: float
    protein: float
    carbs: float
    fat: float
    measure_kind: MeasureKind
    quantity: float
    mass_per_piece: float | None = None
    catalog_id: UUID | None = None
    batch_id: UUID | None = None

    @classmethod
    def from_entry(cls, entry: CompositionEntry) -> "EntryRow":
        quantity = entry.quantity
        return cls(
            id=entry.id,
            name=entry.name,
            calories=entry.calories,
            protein=entry.protein,
            carbs=entry.carbs,
            fat=entry.fat,
            measure_kind=entry.measure_kind,
            quantity=float(quantity) if isinstance(quantity, int | float) else 0.0,
            mass_per_piece=entry.mass_per_piece,
            catalog_id=entry.catalog_id,
            batch_id=entry.batch_id,
        )

    def to_entry(self) -> CompositionEntry:
        return CompositionEntry(
            id=self.id,
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            measure_kind=self.measure_kind,
            quantity=self.quantity,
            mass_per_piece=self.mass_per_piece,
            catalog_id=self.catalog_id,
            batch_id=self.batch_id,
        )


class RecipeRow(BaseModel):
    """Stored recipe template."""

    id: UUID
    name: str = Field(min_length=1)
    entries: list[EntryRow]
    default_finished_mass: float | None = None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeRow":
        return cls(
            id=recipe.id,
            name=recipe.name,
            entries=[EntryRow.from_entry(entry) for entry in recipe.entries],
            default_finished_mass=recipe.default_finished_mass,
        )

    def to_recipe(self) -> Recipe:
        return Recipe(
            id=self.id,
            name=self.name,
            entries=[entry.to_entry() for entry in self.entries],
            default_finished_mass=self.default_finished_mass,
        )


class LogRow(BaseModel):
    """Stored consumption record."""

    id: UUID
    date: dt.date
    name: str
    mass_consumed: float = Field(ge=0)
    calories: float
    protein: float
    carbs: float
    fat: float
    timestamp: dt.datetime
    source_batch_id: UUID | None = None

    @classmethod
    def from_record(cls, record: ConsumptionRecord) -> "LogRow":
        return cls(
            id=record.id,
            date=record.date,
            name=record.name,
            mass_consumed=record.mass_consumed,
            calories=record.calories,
            protein=record.protein,
            carbs=record.carbs,
            fat=record.fat,
            timestamp=record.timestamp,
            source_batch_id=record.source_batch_id,
        )

    def to_record(self) -> ConsumptionRecord:
        return ConsumptionRecord(
            id=self.id,
            date=self.date,
            name=self.name,
            mass_consumed=self.mass_consumed,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            timestamp=self.timestamp,
            source_batch_id=self.source_batch_id,
        )


class BackupFile(BaseModel):
    """Full export of every collection.

    `recipes` is optional; a restore without it leaves recipes untouched.
    """

    model_config = ConfigDict(extra="ignore")

    version: int = Field(ge=1, le=BACKUP_VERSION)
    export_date: dt.datetime | None = None
    user: list[ProfileRow]
    ingredients: list[IngredientRow]
    fridge: list[BatchRow]
    logs: list[LogRow]
    recipes: list[RecipeRow] | None = None
