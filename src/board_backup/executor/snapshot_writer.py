import logging
from collections.abc import Callable

import aiofiles
import aiofiles.os

from board_backup.exception import SnapshotWriteError
from board_backup.model.backup_record import BackupRecord
from board_backup.repository.backup_store import BackupStore
from board_backup.repository.board_store import BoardStore
from board_backup.util.time_util import now_ms

logger = logging.getLogger(__name__)


class SnapshotWriter:
    """
    Copy a board's current file into a new timestamped backup.

    The copy is streamed chunk by chunk into "<backup>.part" and renamed
    into place once complete, so an interrupted copy never shows up as a
    backup in the next listing.
    """

    def __init__(
        self,
        board_store: BoardStore,
        backup_store: BackupStore,
        *,
        chunk_size: int = 64 * 1024,
        clock: Callable[[], int] = now_ms,
    ):
        self.board_store = board_store
        self.backup_store = backup_store
        self.chunk_size = int(chunk_size)
        self._clock = clock

    async def write(self, board_id: str) -> BackupRecord:
        """
        Returns:
            The record of the created backup.

        Raises:
            SnapshotWriteError: source unreadable (e.g. board deleted meanwhile)
                or destination not writable (disk full, permissions)
        """
        record = BackupRecord(board_id=board_id, timestamp_ms=self._clock())
        source = self.board_store.board_path(board_id)
        partial = self.backup_store.partial_path(record)
        target = self.backup_store.backup_path(record)

        try:
            copied = 0
            async with aiofiles.open(source, "rb") as src, aiofiles.open(partial, "wb") as dst:
                while True:
                    chunk = await src.read(self.chunk_size)
                    if not chunk:
                        break
                    await dst.write(chunk)
                    copied += len(chunk)
                await dst.flush()

            await aiofiles.os.replace(partial, target)
        except OSError as e:
            await self._discard_partial(partial)
            raise SnapshotWriteError(f"Backup of board {board_id!r} failed: {e}", board_id=board_id) from e

        logger.debug(f"[SnapshotWriter] {board_id} -> {record.name} ({copied} bytes)")
        return record

    async def _discard_partial(self, path: str) -> None:
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"[SnapshotWriter] Could not remove partial copy {path}: {e}")
