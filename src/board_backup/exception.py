"""Board Backup Exception Definitions"""


class BoardBackupError(Exception):
    """Base exception for the board backup engine"""

    pass


class StoreListingError(BoardBackupError):
    """Board store or backup store directory could not be listed (aborts the cycle)"""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SnapshotWriteError(BoardBackupError):
    """Board file could not be copied into the backup store"""

    def __init__(self, message: str, board_id: str | None = None):
        super().__init__(message)
        self.board_id = board_id


class SnapshotDeleteError(BoardBackupError):
    """Existing backup file could not be removed"""

    def __init__(self, message: str, file_name: str | None = None):
        super().__init__(message)
        self.file_name = file_name
