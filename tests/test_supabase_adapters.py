"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

from macro_prep.adapters.supabase_backup_repository import SupabaseBackupRepository
from macro_prep.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from macro_prep.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from macro_prep.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_prep.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from macro_prep.domain.backup import BackupFile
from macro_prep.domain.catalog import MeasureKind
from macro_prep.domain.composition import Recipe
from macro_prep.domain.consumption import ConsumptionRecord
from macro_prep.domain.ledger import DeleteBatch, InsertRecord, SetBatchMass
from macro_prep.domain.profile import Goal, UserProfile
from tests.conftest import make_batch, make_catalog_entry, make_entry


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def ilike(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeRpc:
    client: "FakeSupabaseClient"
    function: str
    params: dict[str, object]

    def execute(self) -> FakeResponse:
        self.client.rpc_calls.append((self.function, self.params))
        return FakeResponse(data=None)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    rpc_calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]

    def rpc(self, function: str, params: dict[str, object]) -> FakeRpc:
        return FakeRpc(self, function, params)


def _batch_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "name": "Chili",
        "calories": 120,
        "protein": 9.5,
        "carbs": 8,
        "fat": 5,
        "total_mass": 1200,
        "current_mass": 800,
        "created_at": "2024-05-01T12:00:00+00:00",
    }
    row.update(overrides)
    return row


def test_supabase_catalog_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    entry_id = str(uuid4())
    table.queue(
        "select",
        [
            {
                "id": entry_id,
                "name": "Egg",
                "calories": 72,
                "protein": 6.3,
                "carbs": 0.4,
                "fat": 4.8,
                "category": "protein",
                "measure_kind": "piece",
                "mass_per_piece": 50,
            }
        ],
    )

    repository = SupabaseCatalogRepository(client)
    results = repository.search_entries("egg", limit=5)
    repository.create_entries([make_catalog_entry()])

    assert results[0].measure_kind == MeasureKind.PIECE
    assert results[0].mass_per_piece == 50
    assert ("name", "%egg%") in table.last_filters
    assert isinstance(table.last_payload, list)
    assert table.last_payload[0]["measure_kind"] == "mass"


def test_supabase_catalog_repository_update_and_missing() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    entry = make_catalog_entry()
    table.queue("update", [{"id": str(entry.id)}])

    repository = SupabaseCatalogRepository(client)
    repository.update_entry(entry)

    assert isinstance(table.last_payload, dict)
    assert "id" not in table.last_payload
    assert repository.get_entry(uuid4()) is None


def test_supabase_ledger_repository_reads() -> None:
    client = FakeSupabaseClient()
    fridge = client.table("fridge")
    logs = client.table("logs")
    row = _batch_row()
    fridge.queue("select", [row])
    source_id = str(uuid4())
    logs.queue(
        "select",
        [
            {
                "id": str(uuid4()),
                "date": "2024-05-01",
                "name": "Chili",
                "mass_consumed": 250,
                "calories": 300,
                "protein": 24,
                "carbs": 20,
                "fat": 12,
                "timestamp": "2024-05-01T19:30:00+00:00",
                "source_batch_id": source_id,
            }
        ],
    )

    repository = SupabaseLedgerRepository(client)
    batches = repository.list_batches()
    records = repository.list_records_between(date(2024, 5, 1), date(2024, 5, 2))

    assert batches[0].current_mass == 800
    assert batches[0].created_at == datetime(2024, 5, 1, 12, tzinfo=UTC)
    assert records[0].date == date(2024, 5, 1)
    assert str(records[0].source_batch_id) == source_id
    assert ("date", "2024-05-01") in logs.last_filters
    assert ("date", "2024-05-02") in logs.last_filters


def test_supabase_ledger_repository_applies_writes_in_one_call() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseLedgerRepository(client)
    batch = make_batch()
    record_batch = make_batch(current_mass=80)
    record = ConsumptionRecord(
        id=uuid4(),
        date=date(2024, 5, 1),
        name="Chili",
        mass_consumed=80,
        calories=96,
        protein=8,
        carbs=6,
        fat=4,
        timestamp=datetime.now(tz=UTC),
        source_batch_id=record_batch.id,
    )

    repository.apply(
        [
            InsertRecord(record),
            SetBatchMass(batch.id, 120),
            DeleteBatch(record_batch.id),
        ]
    )
    repository.apply([])

    assert len(client.rpc_calls) == 1
    function, params = client.rpc_calls[0]
    assert function == "apply_ledger_writes"
    writes = params["p_writes"]
    assert isinstance(writes, list)
    assert [write["op"] for write in writes] == [
        "insert_record",
        "set_batch_mass",
        "delete_batch",
    ]
    assert writes[0]["row"]["source_batch_id"] == str(record_batch.id)
    assert writes[1]["current_mass"] == 120


def test_supabase_recipe_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    recipe = Recipe(
        id=uuid4(),
        name="Overnight Oats",
        entries=[make_entry(name="Oats", quantity=80)],
        default_finished_mass=300,
    )
    table.queue("insert", [{"id": str(recipe.id)}])

    repository = SupabaseRecipeRepository(client)
    repository.create_recipe(recipe)
    table.queue("select", [table.last_payload])  # type: ignore[list-item]
    fetched = repository.get_recipe(recipe.id)

    assert fetched is not None
    assert fetched.name == "Overnight Oats"
    assert fetched.entries[0].quantity == 80
    assert fetched.default_finished_mass == 300


def test_supabase_profile_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("user_profile")
    table.queue(
        "select",
        [
            {
                "tdee": 2400,
                "target_calories": 1900,
                "target_protein": 160,
                "goal": "lose",
            }
        ],
    )

    repository = SupabaseProfileRepository(client)
    profile = repository.get_profile()
    repository.save_profile(
        UserProfile(tdee=2400, target_calories=2700, target_protein=160, goal=Goal.GAIN)
    )

    assert profile is not None
    assert profile.goal == Goal.LOSE
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["goal"] == "gain"
    assert table.last_payload["id"] == 1


def test_supabase_backup_repository_calls_restore_function() -> None:
    client = FakeSupabaseClient()
    backup = BackupFile.model_validate(
        {"version": 9, "user": [], "ingredients": [], "fridge": [], "logs": []}
    )

    SupabaseBackupRepository(client).restore_snapshot(backup)

    function, params = client.rpc_calls[0]
    assert function == "restore_backup"
    snapshot = params["p_snapshot"]
    assert isinstance(snapshot, dict)
    assert snapshot["recipes"] is None
