"""Supabase repository for restoring backups."""

from dataclasses import dataclass

from supabase import Client

from macro_prep.domain.backup import BackupFile
from macro_prep.services.backup import BackupRepository

RESTORE_FUNCTION = "restore_backup"


@dataclass
class SupabaseBackupRepository(BackupRepository):
    """Replaces every table through one database function call."""

    client: Client

    def restore_snapshot(self, backup: BackupFile) -> None:
        """Send the validated backup to the restore function."""
        self.client.rpc(
            RESTORE_FUNCTION, {"p_snapshot": backup.model_dump(mode="json")}
        ).execute()
