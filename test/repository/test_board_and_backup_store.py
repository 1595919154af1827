import logging

import pytest

from board_backup.exception import StoreListingError
from board_backup.model.backup_record import BackupRecord
from board_backup.repository.backup_store import BackupStore
from board_backup.repository.board_store import BoardStore


class TestBoardStore:

    @pytest.mark.asyncio
    async def test_when_listing_then_extension_stripped(self, board_store, make_board):
        make_board("board-a")
        make_board("board-b")

        assert sorted(await board_store.list_board_ids()) == ["board-a", "board-b"]

    @pytest.mark.asyncio
    async def test_when_other_files_present_then_ignored(self, board_store, make_board, history_dir):
        make_board("board-a")
        (history_dir / "board-a.json.1234.tmp").write_text("{}")
        (history_dir / ".hidden.json").write_text("{}")
        (history_dir / "README").write_text("")

        assert await board_store.list_board_ids() == ["board-a"]

    @pytest.mark.asyncio
    async def test_when_directory_has_board_extension_then_ignored(self, board_store, make_board, history_dir):
        make_board("board-a")
        (history_dir / "archive.json").mkdir()

        assert await board_store.list_board_ids() == ["board-a"]

    @pytest.mark.asyncio
    async def test_when_board_name_contains_dots_then_only_extension_stripped(self, board_store, make_board):
        make_board("board-v1.2")

        assert await board_store.list_board_ids() == ["board-v1.2"]

    @pytest.mark.asyncio
    async def test_when_directory_missing_then_raises_listing_error(self, tmp_path):
        store = BoardStore(str(tmp_path / "missing"))

        with pytest.raises(StoreListingError) as exc_info:
            await store.list_board_ids()

        assert exc_info.value.path == str(tmp_path / "missing")

    def test_board_path(self, board_store, history_dir):
        assert board_store.board_path("board-a") == str(history_dir / "board-a.json")


class TestBackupStore:

    @pytest.mark.asyncio
    async def test_when_listing_then_partial_copies_ignored(self, backup_store, make_backup, backup_dir):
        make_backup("board-a", 1)
        (backup_dir / "board-a__2.json.part").write_text("{")

        assert await backup_store.list_backup_files() == ["board-a__1.json"]

    @pytest.mark.asyncio
    async def test_when_files_lack_extension_then_skipped_with_warning(self, backup_store, make_backup, backup_dir, caplog):
        make_backup("board-a", 1)
        (backup_dir / "board-a__2.bak").write_text("{}")
        (backup_dir / "notes.txt").write_text("")
        (backup_dir / "board-a__3.json.part").write_text("{")

        with caplog.at_level(logging.WARNING):
            files = await backup_store.list_backup_files()

        assert files == ["board-a__1.json"]
        assert "Ignoring 2 file(s)" in caplog.text
        assert "board-a__2.bak" in caplog.text
        assert "board-a__3.json.part" not in caplog.text

    @pytest.mark.asyncio
    async def test_when_directory_missing_then_raises_listing_error(self, tmp_path):
        store = BackupStore(str(tmp_path / "missing"))

        with pytest.raises(StoreListingError):
            await store.list_backup_files()

    @pytest.mark.asyncio
    async def test_ensure_exists_creates_directory(self, tmp_path):
        store = BackupStore(str(tmp_path / "nested" / "backups"))

        await store.ensure_exists()
        await store.ensure_exists()

        assert (tmp_path / "nested" / "backups").is_dir()
        assert await store.list_backup_files() == []

    def test_paths(self, backup_store, backup_dir):
        record = BackupRecord("board-a", 5)

        assert backup_store.backup_path(record) == str(backup_dir / "board-a__5.json")
        assert backup_store.partial_path(record) == str(backup_dir / "board-a__5.json.part")
        assert backup_store.path_for_name("board-a__5") == str(backup_dir / "board-a__5.json")
        assert backup_store.path_for_name("board-a__5.json") == str(backup_dir / "board-a__5.json")
