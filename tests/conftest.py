"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from macro_prep.config import Settings
from macro_prep.containers import AppContainer
from macro_prep.domain.backup import BackupFile
from macro_prep.domain.catalog import CatalogEntry, MeasureKind
from macro_prep.domain.composition import CompositionEntry, Recipe
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
from macro_prep.domain.profile import UserProfile
from macro_prep.services.backup import BackupRepository, BackupService
from macro_prep.services.catalog import CatalogRepository, CatalogService
from macro_prep.services.dashboard import DashboardService
from macro_prep.services.events import ChangeFeed
from macro_prep.services.ledger import ConsumptionLedger, LedgerStore
from macro_prep.services.profile import ProfileRepository, ProfileService
from macro_prep.services.recipes import RecipeRepository, RecipeService
from macro_prep.services.sessions import CompositionService, SessionRegistry
from macro_prep.services.stats import StatsRepository, StatsService

API_TOKEN = "api-token"
AUTH = {"X-Api-Token": API_TOKEN}


def make_batch(  # noqa: PLR0913
    name: str = "Chicken & Rice",
    protein: float = 20.0,
    current_mass: float = 150.0,
    total_mass: float | None = None,
    calories: float = 150.0,
    carbs: float = 10.0,
    fat: float = 5.0,
) -> InventoryBatch:
    return InventoryBatch(
        id=uuid4(),
        name=name,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        total_mass=total_mass if total_mass is not None else current_mass,
        current_mass=current_mass,
        created_at=datetime.now(tz=UTC),
    )


def make_catalog_entry(  # noqa: PLR0913
    name: str = "Chicken Breast",
    calories: float = 165.0,
    protein: float = 31.0,
    carbs: float = 0.0,
    fat: float = 3.6,
    measure_kind: MeasureKind = MeasureKind.MASS,
    mass_per_piece: float | None = None,
) -> CatalogEntry:
    return CatalogEntry(
        id=uuid4(),
        name=name,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        measure_kind=measure_kind,
        category="protein",
        mass_per_piece=mass_per_piece,
    )


def make_entry(  # noqa: PLR0913
    name: str = "Chicken Breast",
    quantity: object = 100,
    calories: float = 165.0,
    protein: float = 31.0,
    carbs: float = 0.0,
    fat: float = 3.6,
    measure_kind: MeasureKind = MeasureKind.MASS,
    mass_per_piece: float | None = None,
    batch_id: UUID | None = None,
) -> CompositionEntry:
    return CompositionEntry(
        id=uuid4(),
        name=name,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        measure_kind=measure_kind,
        quantity=quantity,
        mass_per_piece=mass_per_piece,
        batch_id=batch_id,
    )


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    entries: dict[UUID, CatalogEntry] = field(default_factory=dict)

    def list_entries(self) -> list[CatalogEntry]:
        return sorted(self.entries.values(), key=lambda entry: entry.name)

    def search_entries(self, query: str, limit: int) -> list[CatalogEntry]:
        needle = query.lower()
        return [
            entry for entry in self.list_entries() if needle in entry.name.lower()
        ][:limit]

    def get_entry(self, entry_id: UUID) -> CatalogEntry | None:
        return self.entries.get(entry_id)

    def create_entries(self, entries: list[CatalogEntry]) -> None:
        for entry in entries:
            self.entries[entry.id] = entry

    def update_entry(self, entry: CatalogEntry) -> None:
        self.entries[entry.id] = entry

    def delete_entry(self, entry_id: UUID) -> None:
        self.entries.pop(entry_id, None)


@dataclass
class InMemoryLedgerStore(LedgerStore, StatsRepository):
    """In-memory fridge and log store with all-or-nothing writes.

    Set `fail_after` to make `apply` raise after that many writes have been
    staged; the committed state is left untouched.
    """

    batches: dict[UUID, InventoryBatch] = field(default_factory=dict)
    records: dict[UUID, ConsumptionRecord] = field(default_factory=dict)
    fail_after: int | None = None
    applied: list[list[LedgerWrite]] = field(default_factory=list)

    def add_batch(self, batch: InventoryBatch) -> InventoryBatch:
        self.batches[batch.id] = batch
        return batch

    def list_batches(self) -> list[InventoryBatch]:
        return list(self.batches.values())

    def get_batch(self, batch_id: UUID) -> InventoryBatch | None:
        return self.batches.get(batch_id)

    def list_records(self, on_date: date | None = None) -> list[ConsumptionRecord]:
        return [
            record
            for record in self.records.values()
            if on_date is None or record.date == on_date
        ]

    def list_records_between(self, start: date, end: date) -> list[ConsumptionRecord]:
        return [
            record for record in self.records.values() if start <= record.date < end
        ]

    def get_record(self, record_id: UUID) -> ConsumptionRecord | None:
        return self.records.get(record_id)

    def apply(self, writes: list[LedgerWrite]) -> None:
        batches = dict(self.batches)
        records = dict(self.records)
        for index, write in enumerate(writes):
            if self.fail_after is not None and index >= self.fail_after:
                raise RuntimeError("simulated store failure")
            if isinstance(write, InsertRecord):
                records[write.record.id] = write.record
            elif isinstance(write, DeleteRecord):
                records.pop(write.record_id, None)
            elif isinstance(write, InsertBatch):
                batches[write.batch.id] = write.batch
            elif isinstance(write, SetBatchMass):
                current = batches[write.batch_id]
                batches[write.batch_id] = InventoryBatch(
                    id=current.id,
                    name=current.name,
                    calories=current.calories,
                    protein=current.protein,
                    carbs=current.carbs,
                    fat=current.fat,
                    total_mass=current.total_mass,
                    current_mass=write.current_mass,
                    created_at=current.created_at,
                )
            elif isinstance(write, DeleteBatch):
                batches.pop(write.batch_id, None)
        self.batches = batches
        self.records = records
        self.applied.append(list(writes))


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[UUID, Recipe] = field(default_factory=dict)

    def list_recipes(self) -> list[Recipe]:
        return list(self.recipes.values())

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def create_recipe(self, recipe: Recipe) -> None:
        self.recipes[recipe.id] = recipe

    def delete_recipe(self, recipe_id: UUID) -> None:
        self.recipes.pop(recipe_id, None)


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profile: UserProfile | None = None

    def get_profile(self) -> UserProfile | None:
        return self.profile

    def save_profile(self, profile: UserProfile) -> None:
        self.profile = profile


@dataclass
class InMemoryBackupRepository(BackupRepository):
    """Restores a backup into the other in-memory repositories."""

    catalog: InMemoryCatalogRepository
    ledger: InMemoryLedgerStore
    recipes: InMemoryRecipeRepository
    profile: InMemoryProfileRepository
    fail: bool = False

    def restore_snapshot(self, backup: BackupFile) -> None:
        if self.fail:
            raise RuntimeError("simulated restore failure")
        self.catalog.entries = {
            row.id: row.to_entry() for row in backup.ingredients
        }
        self.ledger.batches = {row.id: row.to_batch() for row in backup.fridge}
        self.ledger.records = {row.id: row.to_record() for row in backup.logs}
        self.profile.profile = backup.user[0].to_profile() if backup.user else None
        if backup.recipes is not None:
            self.recipes.recipes = {
                row.id: row.to_recipe() for row in backup.recipes
            }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        api_token=API_TOKEN,
        seed_catalog=False,
    )


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def ledger(store: InMemoryLedgerStore, feed: ChangeFeed) -> ConsumptionLedger:
    return ConsumptionLedger(store, feed)


@pytest.fixture
def container(
    settings: Settings, store: InMemoryLedgerStore, feed: ChangeFeed
) -> AppContainer:
    catalog_repository = InMemoryCatalogRepository()
    recipe_repository = InMemoryRecipeRepository()
    profile_repository = InMemoryProfileRepository()
    catalog_service = CatalogService(catalog_repository, feed)
    ledger = ConsumptionLedger(store, feed)
    profile_service = ProfileService(profile_repository, feed)
    stats_service = StatsService(store)
    return AppContainer(
        settings=settings,
        feed=feed,
        sessions=SessionRegistry(),
        catalog_service=catalog_service,
        ledger=ledger,
        composition_service=CompositionService(catalog_service, ledger),
        recipe_service=RecipeService(recipe_repository, feed),
        profile_service=profile_service,
        stats_service=stats_service,
        dashboard_service=DashboardService(
            ledger=ledger,
            stats_service=stats_service,
            profile_service=profile_service,
            feed=feed,
        ),
        backup_service=BackupService(
            catalog_repository=catalog_repository,
            ledger_store=store,
            recipe_repository=recipe_repository,
            profile_repository=profile_repository,
            backup_repository=InMemoryBackupRepository(
                catalog=catalog_repository,
                ledger=store,
                recipes=recipe_repository,
                profile=profile_repository,
            ),
            feed=feed,
        ),
    )
