"""Backup store: directory of "<board_id>__<timestamp_ms><extension>" files owned by this engine."""

import logging
import os

import aiofiles.os

from board_backup.exception import StoreListingError
from board_backup.model.backup_record import BackupRecord

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


class BackupStore:

    def __init__(self, root: str, extension: str = ".json"):
        self.root = root
        self.extension = extension

    async def ensure_exists(self) -> None:
        await aiofiles.os.makedirs(self.root, exist_ok=True)

    async def list_backup_files(self) -> list[str]:
        """
        List backup filenames. In-flight partial copies are not included.

        Raises:
            StoreListingError: directory missing or unreadable
        """
        try:
            names = await aiofiles.os.listdir(self.root)
        except OSError as e:
            raise StoreListingError(f"Cannot list backup store {self.root}: {e}", path=self.root) from e

        backups = []
        skipped = []
        for name in names:
            if name.endswith(PARTIAL_SUFFIX):
                continue
            if name.endswith(self.extension):
                backups.append(name)
            else:
                skipped.append(name)

        if skipped:
            logger.warning(
                f"[BackupStore] Ignoring {len(skipped)} file(s) without extension "
                f"'{self.extension}' in {self.root}: {sorted(skipped)[:5]}"
            )
        return backups

    def backup_path(self, record: BackupRecord) -> str:
        return os.path.join(self.root, record.file_name(self.extension))

    def partial_path(self, record: BackupRecord) -> str:
        return self.backup_path(record) + PARTIAL_SUFFIX

    def path_for_name(self, name: str) -> str:
        """Path of a backup given its name with or without the extension."""
        if self.extension and not name.endswith(self.extension):
            name = f"{name}{self.extension}"
        return os.path.join(self.root, name)
