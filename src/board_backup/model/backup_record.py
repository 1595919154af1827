from dataclasses import dataclass

BACKUP_NAME_SEPARATOR = "__"


def strip_extension(file_name: str, extension: str) -> str:
    if extension and file_name.endswith(extension):
        return file_name[: len(file_name) - len(extension)]
    return file_name


@dataclass(frozen=True, order=True)
class BackupRecord:
    """
    One retained copy of a board, identified by (board_id, timestamp_ms).

    Materialized on disk as "<board_id>__<timestamp_ms><extension>". The
    filename is the only catalog; there is no separate index.
    """

    board_id: str
    timestamp_ms: int

    @property
    def name(self) -> str:
        """Backup name without extension, e.g. 'board-anonymous__1647275441964'."""
        return f"{self.board_id}{BACKUP_NAME_SEPARATOR}{self.timestamp_ms}"

    def file_name(self, extension: str = ".json") -> str:
        return f"{self.name}{extension}"

    @classmethod
    def parse(cls, file_name: str, extension: str = ".json") -> "BackupRecord":
        """
        Parse a backup filename into a record.

        The board id is everything before the LAST separator, so board ids that
        themselves contain "__" still round-trip.

        Raises:
            ValueError: if the name has no separator, an empty board id,
                or a timestamp that is not a non-negative integer.
        """
        stem = strip_extension(file_name, extension)
        board_id, sep, raw_ts = stem.rpartition(BACKUP_NAME_SEPARATOR)

        if not sep or not board_id:
            raise ValueError(f"missing '{BACKUP_NAME_SEPARATOR}' separator in backup name: {file_name!r}")
        if not raw_ts.isdigit():
            raise ValueError(f"invalid timestamp {raw_ts!r} in backup name: {file_name!r}")

        return cls(board_id=board_id, timestamp_ms=int(raw_ts))
