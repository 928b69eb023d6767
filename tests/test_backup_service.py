"""Tests for backup export and restore."""

import json
from collections.abc import Callable
from datetime import date
from typing import Any

import pytest

from macro_prep.containers import AppContainer
from macro_prep.domain.backup import BACKUP_VERSION
from macro_prep.domain.composition import CompositionSession
from macro_prep.domain.distribution import DistributionMode
from macro_prep.domain.profile import Goal
from macro_prep.errors import MalformedBackupError, TransactionFailedError
from macro_prep.services.profile import manual_targets
from tests.conftest import (
    InMemoryBackupRepository,
    InMemoryLedgerStore,
    make_batch,
    make_entry,
)


def _populate(container: AppContainer, store: InMemoryLedgerStore) -> None:
    container.profile_service.save(manual_targets(2000, 150, Goal.MAINTAIN))
    container.catalog_service.create(
        {"name": "Egg", "measure_kind": "piece", "mass_per_piece": 50, "protein": 6.3}
    )
    batch = store.add_batch(make_batch(current_mass=500))
    container.ledger.consume_from_batch(
        batch.id, DistributionMode.SCALE, 100, date(2024, 5, 1)
    )
    container.recipe_service.save_from_session(
        CompositionSession(entries=[make_entry()], finished_mass=90), "Chicken"
    )


def test_export_contains_every_collection(
    container: AppContainer, store: InMemoryLedgerStore
) -> None:
    _populate(container, store)

    document = json.loads(container.backup_service.export_json())

    assert document["version"] == BACKUP_VERSION
    assert document["export_date"]
    assert len(document["user"]) == 1
    assert document["ingredients"][0]["measure_kind"] == "piece"
    assert document["fridge"][0]["current_mass"] == 400
    assert document["logs"][0]["date"] == "2024-05-01"
    assert document["recipes"][0]["entries"][0]["quantity"] == 100


def test_restore_replaces_collections(
    container: AppContainer, store: InMemoryLedgerStore
) -> None:
    _populate(container, store)
    exported = container.backup_service.export_json()
    store.batches.clear()
    store.records.clear()
    container.catalog_service.create({"name": "Stray"})

    container.backup_service.restore_json(exported)

    assert [batch.current_mass for batch in store.list_batches()] == [400]
    assert len(store.records) == 1
    assert [entry.name for entry in container.catalog_service.search(None)] == ["Egg"]
    assert container.profile_service.get() is not None
    assert len(container.recipe_service.list_recipes()) == 1


def test_restore_without_recipes_leaves_them(
    container: AppContainer, store: InMemoryLedgerStore
) -> None:
    _populate(container, store)
    document = json.loads(container.backup_service.export_json())
    del document["recipes"]
    document["logs"] = []

    container.backup_service.restore_json(json.dumps(document))

    assert not store.records
    assert len(container.recipe_service.list_recipes()) == 1


@pytest.mark.parametrize(
    "mutate",
    [
        lambda doc: doc.pop("fridge"),
        lambda doc: doc.update(version=BACKUP_VERSION + 1),
        lambda doc: doc["fridge"][0].update(current_mass=10_000),
        lambda doc: doc["ingredients"][0].update(mass_per_piece=None),
    ],
)
def test_malformed_backup_aborts_before_writing(
    container: AppContainer,
    store: InMemoryLedgerStore,
    mutate: Callable[[dict[str, Any]], object],
) -> None:
    _populate(container, store)
    document = json.loads(container.backup_service.export_json())
    mutate(document)
    store.records.clear()

    with pytest.raises(MalformedBackupError):
        container.backup_service.restore_json(json.dumps(document))

    assert not store.records


def test_restore_rejects_invalid_json(container: AppContainer) -> None:
    with pytest.raises(MalformedBackupError):
        container.backup_service.restore_json("{not json")


def test_restore_failure_is_reported(
    container: AppContainer, store: InMemoryLedgerStore
) -> None:
    _populate(container, store)
    exported = container.backup_service.export_json()
    repository = container.backup_service.backup_repository
    assert isinstance(repository, InMemoryBackupRepository)
    repository.fail = True

    with pytest.raises(TransactionFailedError):
        container.backup_service.restore_json(exported)

    assert len(store.batches) == 1
