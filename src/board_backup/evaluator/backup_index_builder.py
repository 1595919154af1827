import logging
from collections.abc import Iterable

from board_backup.model.backup_record import BackupRecord

logger = logging.getLogger(__name__)

BackupIndex = dict[str, list[int]]


def build_backup_index(
    backup_file_names: Iterable[str],
    board_ids: Iterable[str],
    extension: str = ".json",
) -> BackupIndex:
    """
    Group backup filenames by board, newest timestamp first.

    Every active board gets an entry, with an empty list when it has never
    been backed up. Backups whose board is not active (orphans) are left out
    of the index but stay on disk. Names that cannot be parsed are skipped
    with a warning.

    Args:
        backup_file_names: raw listing of the backup store
        board_ids: whitelist of currently active board ids
        extension: backup file extension

    Returns:
        {board_id: [timestamp_ms, ...]} sorted descending
    """
    index: BackupIndex = {board_id: [] for board_id in board_ids}
    orphaned = 0

    for file_name in backup_file_names:
        try:
            record = BackupRecord.parse(file_name, extension)
        except ValueError as e:
            logger.warning(f"[BackupIndex] Skipping malformed backup name: {e}")
            continue

        if record.board_id not in index:
            orphaned += 1
            continue

        index[record.board_id].append(record.timestamp_ms)

    # Listing order says nothing about recency
    for timestamps in index.values():
        timestamps.sort(reverse=True)

    if orphaned:
        logger.warning(f"[BackupIndex] Excluded {orphaned} backup(s) of boards that no longer exist (retained on disk)")

    return index
