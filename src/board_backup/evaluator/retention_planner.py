import logging

from board_backup.evaluator.backup_index_builder import BackupIndex
from board_backup.model.backup_record import BackupRecord
from board_backup.model.retention_model import RetentionPlan, RetentionPolicy

logger = logging.getLogger(__name__)


class RetentionPlanner:
    """
    Decide which boards get a fresh backup and which old backups go.

    Pure: no I/O, the current time is passed in.

    Rules per board:
        - no backups yet                         -> back up
        - newest backup older than min interval  -> back up
        - otherwise                              -> current, untouched
    A board that is backed up keeps at most `max_copies` copies counting the
    new one, so the oldest `existing + 1 - max_copies` backups are deleted.
    Boards that are not backed up this cycle are never pruned.
    """

    def __init__(self, policy: RetentionPolicy):
        self.policy = policy

    def plan(self, index: BackupIndex, now_ms: int) -> RetentionPlan:
        plan = RetentionPlan()

        if not self.policy.backups_enabled:
            logger.debug(f"[RetentionPlanner] Backups off (max_copies={self.policy.max_copies})")
            return plan

        for board_id, timestamps in index.items():
            timestamps = sorted(timestamps, reverse=True)
            if not self._needs_backup(timestamps, now_ms):
                continue

            plan.to_backup.add(board_id)
            plan.to_delete.update(self._surplus(board_id, timestamps))

        logger.debug(
            f"[RetentionPlanner] boards={len(index)} to_backup={len(plan.to_backup)} to_delete={len(plan.to_delete)}"
        )
        return plan

    def _needs_backup(self, timestamps: list[int], now_ms: int) -> bool:
        if not timestamps:
            return True
        return now_ms - timestamps[0] >= self.policy.min_interval_ms

    def _surplus(self, board_id: str, timestamps: list[int]) -> list[BackupRecord]:
        """Oldest backups that exceed the limit once the new backup exists."""
        surplus = len(timestamps) + 1 - self.policy.max_copies
        if surplus <= 0:
            return []
        return [BackupRecord(board_id=board_id, timestamp_ms=ts) for ts in timestamps[-surplus:]]


def plan_retention(index: BackupIndex, policy: RetentionPolicy, now_ms: int) -> RetentionPlan:
    return RetentionPlanner(policy).plan(index, now_ms)
