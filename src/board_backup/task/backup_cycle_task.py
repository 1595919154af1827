import asyncio
import logging
from collections.abc import Callable

from board_backup.evaluator.backup_index_builder import build_backup_index
from board_backup.evaluator.retention_planner import RetentionPlanner
from board_backup.exception import StoreListingError
from board_backup.executor.snapshot_deleter import SnapshotDeleter
from board_backup.executor.snapshot_writer import SnapshotWriter
from board_backup.model.backup_record import BackupRecord
from board_backup.model.enum.backup_event_enum import BackupEventType, CycleStatus
from board_backup.model.retention_model import CycleSummary, RetentionPolicy
from board_backup.repository.backup_store import BackupStore
from board_backup.repository.board_store import BoardStore
from board_backup.task.async_job_base import AsyncRecurringJob
from board_backup.util.event_sink import BackupEventSink, LoggingEventSink
from board_backup.util.time_util import now_ms

logger = logging.getLogger(__name__)


class BackupCycleTask(AsyncRecurringJob):
    """
    Recurring job that keeps a bounded history of every board.

    One cycle:
        1. list active boards and existing backups
        2. build the per-board backup index and plan retention
        3. back up every board that needs it (concurrently)
        4. delete surplus backups of the boards backed up in step 3 (concurrently)
        5. emit a cycle summary

    Only one cycle runs at a time; a cycle requested while another is in
    flight is skipped, not queued.
    """

    def __init__(
        self,
        board_store: BoardStore,
        backup_store: BackupStore,
        policy: RetentionPolicy,
        *,
        writer: SnapshotWriter | None = None,
        deleter: SnapshotDeleter | None = None,
        event_sink: BackupEventSink | None = None,
        enabled: bool = True,
        max_concurrency: int = 16,
        cycle_interval_seconds: float = 3600.0,
        initial_delay_seconds: float = 0.0,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Args:
            board_store: read-only board store
            backup_store: backup store owned by this job
            policy: retention policy (max copies / min interval)
            writer: snapshot writer (default: built from the stores)
            deleter: snapshot deleter (default: built from backup_store)
            event_sink: receiver of structured events (default: logging)
            enabled: administrative on/off switch
            max_concurrency: max outstanding copy/delete operations per phase
            cycle_interval_seconds: how often the recurring loop runs a cycle
            initial_delay_seconds: wait before the first recurring cycle
            clock: current time in epoch milliseconds
        """
        self.board_store = board_store
        self.backup_store = backup_store
        self.planner = RetentionPlanner(policy)
        self.writer = writer or SnapshotWriter(board_store, backup_store, clock=clock)
        self.deleter = deleter or SnapshotDeleter(backup_store)
        self.event_sink = event_sink or LoggingEventSink()
        self.enabled = bool(enabled)
        self.max_concurrency = int(max_concurrency)
        self._clock = clock

        self._cycle_in_progress: bool = False

        super().__init__(interval_seconds=cycle_interval_seconds, initial_delay_seconds=initial_delay_seconds)

    @property
    def cycle_in_progress(self) -> bool:
        return self._cycle_in_progress

    async def run_once(self) -> None:
        await self.run_cycle()

    async def run_cycle(self) -> CycleSummary:
        """
        Run one backup cycle.

        Returns:
            CycleSummary with per-phase success / failure counts.

        Raises:
            StoreListingError: board store or backup store could not be listed;
                nothing was written or deleted.
        """
        if self._cycle_in_progress:
            self.event_sink.emit_event(BackupEventType.CYCLE_SKIPPED_OVERLAP)
            return CycleSummary(status=CycleStatus.SKIPPED_OVERLAP)

        if not self.enabled:
            logger.debug("[BackupCycle] Backups disabled, skipping cycle")
            return CycleSummary(status=CycleStatus.DISABLED)

        self._cycle_in_progress = True
        try:
            return await self._execute_cycle()
        finally:
            self._cycle_in_progress = False

    # ----------------------------------------------------------------------
    # Cycle phases
    # ----------------------------------------------------------------------
    async def _execute_cycle(self) -> CycleSummary:
        try:
            board_ids = await self.board_store.list_board_ids()
            backup_files = await self.backup_store.list_backup_files()
        except StoreListingError as e:
            self.event_sink.emit_event(BackupEventType.CYCLE_ABORTED, path=e.path, error=str(e))
            raise

        index = build_backup_index(backup_files, board_ids, self.backup_store.extension)
        plan = self.planner.plan(index, self._clock())

        backed_up, backup_failed = await self._run_backups(sorted(plan.to_backup))

        # A board is only pruned once its replacement exists
        deletions = [r for board_id in sorted(backed_up) for r in plan.deletions_for(board_id)]
        held_back = len(plan.to_delete) - len(deletions)
        if held_back:
            logger.info(f"[BackupCycle] Kept {held_back} old backup(s) of boards whose new backup failed")

        deleted, delete_failed = await self._run_deletions(deletions)

        summary = CycleSummary(
            status=CycleStatus.COMPLETED,
            backed_up=len(backed_up),
            deleted=deleted,
            backup_failed=backup_failed,
            delete_failed=delete_failed,
        )
        self.event_sink.emit_event(
            BackupEventType.CYCLE_SUMMARY,
            backed_up=summary.backed_up,
            deleted=summary.deleted,
            failed=summary.failed,
            boards=len(index),
        )
        return summary

    async def _run_backups(self, board_ids: list[str]) -> tuple[set[str], int]:
        if not board_ids:
            return set(), 0

        sem = asyncio.Semaphore(self.max_concurrency)

        async def _backup(board_id: str) -> BackupRecord:
            async with sem:
                return await self.writer.write(board_id)

        results = await asyncio.gather(*(_backup(b) for b in board_ids), return_exceptions=True)

        succeeded: set[str] = set()
        failed = 0
        for idx, r in enumerate(results):
            board_id = board_ids[idx]
            if isinstance(r, BaseException):
                failed += 1
                self.event_sink.emit_event(BackupEventType.BACKUP_FAILED, board_id=board_id, error=str(r))
                continue
            succeeded.add(board_id)

        return succeeded, failed

    async def _run_deletions(self, records: list[BackupRecord]) -> tuple[int, int]:
        if not records:
            return 0, 0

        sem = asyncio.Semaphore(self.max_concurrency)

        async def _delete(record: BackupRecord) -> bool:
            async with sem:
                return await self.deleter.delete(record)

        results = await asyncio.gather(*(_delete(r) for r in records), return_exceptions=True)

        deleted = 0
        failed = 0
        for idx, r in enumerate(results):
            if isinstance(r, BaseException):
                failed += 1
                self.event_sink.emit_event(
                    BackupEventType.DELETE_FAILED,
                    board_id=records[idx].board_id,
                    backup=records[idx].name,
                    error=str(r),
                )
                continue
            # Already-absent backups count as deleted
            deleted += 1

        return deleted, failed
