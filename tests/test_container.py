"""Tests for container wiring."""

from macro_prep.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from macro_prep.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.ledger is not None
    assert isinstance(container.ledger.store, SupabaseLedgerRepository)
    assert container.stats_service.repository is container.ledger.store
    assert container.dashboard_service.feed is container.feed
    assert container.backup_service.feed is container.feed
