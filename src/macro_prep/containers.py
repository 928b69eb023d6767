"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from macro_prep.adapters.supabase_backup_repository import SupabaseBackupRepository
from macro_prep.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from macro_prep.adapters.supabase_ledger_repository import SupabaseLedgerRepository
from macro_prep.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from macro_prep.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from macro_prep.config import Settings
from macro_prep.services.backup import BackupService
from macro_prep.services.catalog import CatalogService
from macro_prep.services.dashboard import DashboardService
from macro_prep.services.events import ChangeFeed
from macro_prep.services.ledger import ConsumptionLedger
from macro_prep.services.profile import ProfileService
from macro_prep.services.recipes import RecipeService
from macro_prep.services.sessions import CompositionService, SessionRegistry
from macro_prep.services.stats import StatsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    feed: ChangeFeed
    sessions: SessionRegistry
    catalog_service: CatalogService
    ledger: ConsumptionLedger
    composition_service: CompositionService
    recipe_service: RecipeService
    profile_service: ProfileService
    stats_service: StatsService
    dashboard_service: DashboardService
    backup_service: BackupService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    feed = ChangeFeed()
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    ledger_repository = SupabaseLedgerRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    backup_repository = SupabaseBackupRepository(supabase_client)
    catalog_service = CatalogService(catalog_repository, feed)
    ledger = ConsumptionLedger(ledger_repository, feed)
    profile_service = ProfileService(profile_repository, feed)
    stats_service = StatsService(ledger_repository, resolved_settings.timezone)
    return AppContainer(
        settings=resolved_settings,
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
            ledger_store=ledger_repository,
            recipe_repository=recipe_repository,
            profile_repository=profile_repository,
            backup_repository=backup_repository,
            feed=feed,
        ),
    )
