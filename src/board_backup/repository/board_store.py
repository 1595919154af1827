"""Read-only view of the board store (owned by the board persistence layer)."""

import logging
import os

import aiofiles.os

from board_backup.exception import StoreListingError
from board_backup.model.backup_record import strip_extension

logger = logging.getLogger(__name__)


class BoardStore:
    """
    Directory holding one "<board_id><extension>" file per active board.

    This engine never writes here; it only lists board ids and opens
    board files for reading.
    """

    def __init__(self, root: str, extension: str = ".json"):
        self.root = root
        self.extension = extension

    async def list_board_ids(self) -> list[str]:
        """
        Ids of the boards currently saved. Only regular files carrying the
        board extension count; directories and hidden entries are skipped.

        Raises:
            StoreListingError: directory missing or unreadable
        """
        try:
            names = await aiofiles.os.listdir(self.root)
        except OSError as e:
            raise StoreListingError(f"Cannot list board store {self.root}: {e}", path=self.root) from e

        board_ids = []
        for name in names:
            if not self._is_board_file(name):
                continue
            if not await aiofiles.os.path.isfile(os.path.join(self.root, name)):
                logger.debug(f"[BoardStore] Skipping non-file entry {name}")
                continue
            board_ids.append(strip_extension(name, self.extension))

        logger.debug(f"[BoardStore] {len(board_ids)} board(s) in {self.root}")
        return board_ids

    def board_path(self, board_id: str) -> str:
        return os.path.join(self.root, f"{board_id}{self.extension}")

    def _is_board_file(self, name: str) -> bool:
        if name.startswith("."):
            return False
        if not self.extension:
            return True
        return name.endswith(self.extension) and len(name) > len(self.extension)
