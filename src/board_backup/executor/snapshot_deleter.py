import logging

import aiofiles.os

from board_backup.exception import SnapshotDeleteError
from board_backup.model.backup_record import BackupRecord
from board_backup.repository.backup_store import BackupStore

logger = logging.getLogger(__name__)


class SnapshotDeleter:
    """Remove backups from the backup store. Deleting a missing backup is a no-op."""

    def __init__(self, backup_store: BackupStore):
        self.backup_store = backup_store

    async def delete(self, target: BackupRecord | str) -> bool:
        """
        Args:
            target: a BackupRecord, or a backup name with or without extension
                (e.g. 'board-anonymous__916298476' or 'board-anonymous__916298476.json')

        Returns:
            True if a file was removed, False if it was already gone.

        Raises:
            SnapshotDeleteError: the file exists but cannot be removed
        """
        if isinstance(target, BackupRecord):
            path = self.backup_store.backup_path(target)
        else:
            path = self.backup_store.path_for_name(target)

        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug(f"[SnapshotDeleter] Already absent: {path}")
            return False
        except OSError as e:
            raise SnapshotDeleteError(f"Cannot delete backup {path}: {e}", file_name=path) from e

        logger.debug(f"[SnapshotDeleter] Deleted {path}")
        return True
