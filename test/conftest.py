from pathlib import Path

import pytest

from board_backup.repository.backup_store import BackupStore
from board_backup.repository.board_store import BoardStore

# ----------------------
# Fixtures
# ----------------------


@pytest.fixture
def history_dir(tmp_path) -> Path:
    path = tmp_path / "server-data"
    path.mkdir()
    return path


@pytest.fixture
def backup_dir(tmp_path) -> Path:
    path = tmp_path / "backups"
    path.mkdir()
    return path


@pytest.fixture
def board_store(history_dir) -> BoardStore:
    return BoardStore(str(history_dir), ".json")


@pytest.fixture
def backup_store(backup_dir) -> BackupStore:
    return BackupStore(str(backup_dir), ".json")


@pytest.fixture
def make_board(history_dir):
    """
    Factory fixture writing an active board file.
    Usage:
        make_board("board-a", '{"id": 1}')
    """

    def _make(board_id: str, content: str = '{"shapes": []}') -> Path:
        path = history_dir / f"{board_id}.json"
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def make_backup(backup_dir):
    """
    Factory fixture writing an existing backup file.
    Usage:
        make_backup("board-a", 1647275441964)
    """

    def _make(board_id: str, timestamp_ms: int, content: str = "{}") -> Path:
        path = backup_dir / f"{board_id}__{timestamp_ms}.json"
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def backups_of(backup_dir):
    """Sorted backup filenames of one board currently on disk."""

    def _list(board_id: str) -> list[str]:
        prefix = f"{board_id}__"
        return sorted(p.name for p in backup_dir.iterdir() if p.name.startswith(prefix))

    return _list
