"""Factory for building the backup cycle task from configuration."""

import logging

from board_backup.executor.snapshot_deleter import SnapshotDeleter
from board_backup.executor.snapshot_writer import SnapshotWriter
from board_backup.repository.backup_store import BackupStore
from board_backup.repository.board_store import BoardStore
from board_backup.schema.backup_config_schema import BackupConfig
from board_backup.task.backup_cycle_task import BackupCycleTask
from board_backup.util.event_sink import BackupEventSink, LoggingEventSink

logger = logging.getLogger(__name__)


async def build_backup_cycle_task(
    config: BackupConfig,
    event_sink: BackupEventSink | None = None,
) -> BackupCycleTask:
    """
    Build the backup cycle task and its stores.

    The backup store directory is created when backups are enabled; the
    board store is left alone (it belongs to the persistence layer).

    Examples:
        >>> config = ConfigManager.load_backup_config("res/backup_config.yml")
        >>> task = await build_backup_cycle_task(config)
        >>> summary = await task.run_cycle()
    """
    board_store = BoardStore(config.history_dir, config.file_extension)
    backup_store = BackupStore(config.backup_dir, config.file_extension)

    if config.enabled:
        await backup_store.ensure_exists()

    policy = config.retention_policy
    logger.info(
        f"Initializing board backup: "
        f"enabled={config.enabled}, "
        f"copies={policy.max_copies}, "
        f"interval={policy.min_interval_ms}ms, "
        f"boards={config.history_dir}, "
        f"backups={config.backup_dir}"
    )
    if config.enabled and not policy.backups_enabled:
        logger.warning(f"Backup copies set to {policy.max_copies}; no backups will be taken")

    writer = SnapshotWriter(board_store, backup_store, chunk_size=config.copy_chunk_size)
    deleter = SnapshotDeleter(backup_store)

    return BackupCycleTask(
        board_store=board_store,
        backup_store=backup_store,
        policy=policy,
        writer=writer,
        deleter=deleter,
        event_sink=event_sink or LoggingEventSink(),
        enabled=config.enabled,
        max_concurrency=config.max_concurrency,
        cycle_interval_seconds=config.cycle_interval_seconds,
        initial_delay_seconds=config.initial_delay_seconds,
    )
