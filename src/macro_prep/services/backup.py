"""Export and restore of every collection as one JSON document."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from pydantic import ValidationError

from macro_prep.domain.backup import (
    BACKUP_VERSION,
    BackupFile,
    BatchRow,
    IngredientRow,
    LogRow,
    ProfileRow,
    RecipeRow,
)
from macro_prep.errors import LedgerError, MalformedBackupError, TransactionFailedError
from macro_prep.services.catalog import CatalogRepository
from macro_prep.services.events import COLLECTIONS, ChangeFeed
from macro_prep.services.ledger import LedgerStore
from macro_prep.services.profile import ProfileRepository
from macro_prep.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)


class BackupRepository(Protocol):
    """Persistence interface for replacing every collection at once."""

    def restore_snapshot(self, backup: BackupFile) -> None:
        """Replace stored collections with the backup, all or nothing."""


@dataclass
class BackupService:
    """Builds backup documents and restores them."""

    catalog_repository: CatalogRepository
    ledger_store: LedgerStore
    recipe_repository: RecipeRepository
    profile_repository: ProfileRepository
    backup_repository: BackupRepository
    feed: ChangeFeed

    def export(self) -> BackupFile:
        """Snapshot every collection."""
        profile = self.profile_repository.get_profile()
        return BackupFile(
            version=BACKUP_VERSION,
            export_date=datetime.now(tz=UTC),
            user=[ProfileRow.from_profile(profile)] if profile else [],
            ingredients=[
                IngredientRow.from_entry(entry)
                for entry in self.catalog_repository.list_entries()
            ],
            fridge=[
                BatchRow.from_batch(batch) for batch in self.ledger_store.list_batches()
            ],
            logs=[
                LogRow.from_record(record)
                for record in self.ledger_store.list_records()
            ],
            recipes=[
                RecipeRow.from_recipe(recipe)
                for recipe in self.recipe_repository.list_recipes()
            ],
        )

    def export_json(self) -> str:
        """Return the backup document as indented JSON."""
        return self.export().model_dump_json(indent=2)

    def restore_json(self, raw: str | bytes) -> BackupFile:
        """Validate a backup document and replace the stored collections."""
        try:
            backup = BackupFile.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedBackupError(f"Invalid backup file: {exc}") from exc
        return self.restore(backup)

    def restore(self, backup: BackupFile) -> BackupFile:
        """Replace the stored collections with a validated backup."""
        try:
            self.backup_repository.restore_snapshot(backup)
        except LedgerError:
            raise
        except Exception as exc:
            _logger.exception("Backup restore failed; nothing applied")
            raise TransactionFailedError("Backup restore failed") from exc
        self.feed.publish(COLLECTIONS)
        _logger.info(
            "Restored backup v%s: %s ingredients, %s batches, %s logs",
            backup.version,
            len(backup.ingredients),
            len(backup.fridge),
            len(backup.logs),
        )
        return backup
