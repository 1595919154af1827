import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from board_backup.exception import StoreListingError
from board_backup.model.enum.backup_event_enum import BackupEventType
from board_backup.util.config_manager import ConfigManager
from board_backup.util.event_sink import LoggingEventSink, RecordingEventSink
from board_backup.util.factory.backup_factory import build_backup_cycle_task
from board_backup.util.logger_config import setup_logging

logger = logging.getLogger("BackupMain")

FAILURE_EVENTS = (BackupEventType.BACKUP_FAILED, BackupEventType.DELETE_FAILED)


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


async def main(config_path: str | None = None, once: bool = False) -> int:
    load_dotenv()

    config = ConfigManager.load_backup_config(config_path)
    # stdout is reserved for the JSON summary in single-cycle mode
    setup_logging(
        log_level=config.log_level,
        log_to_file=config.log_to_file,
        log_dir=config.log_dir,
        stream=sys.stderr if once else sys.stdout,
    )

    # ----------------------------------------------------------------------
    # Single cycle (cron / manual)
    # ----------------------------------------------------------------------
    if once:
        sink = RecordingEventSink(forward_to=LoggingEventSink())
        task = await build_backup_cycle_task(config, event_sink=sink)
        try:
            summary = await task.run_cycle()
        except StoreListingError as e:
            logger.error(f"Backup cycle aborted: {e}")
            return 1

        result = summary.to_dict()
        result["failures"] = [
            {"event": e.event.value, **e.fields} for e in sink.events if e.event in FAILURE_EVENTS
        ]
        _print_json(result)
        return 0

    # ----------------------------------------------------------------------
    # Daemon: recurring cycles until interrupted
    # ----------------------------------------------------------------------
    task = await build_backup_cycle_task(config)
    if not config.enabled:
        logger.info("Automatic backup disabled; nothing to schedule")
        return 0

    task.start()
    logger.info(f"Backup scheduler started (every {task.interval_seconds}s, first run in {task.initial_delay_seconds}s)")
    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down...")
        await task.stop()

    return 0


def cli() -> None:
    parser = argparse.ArgumentParser(description="Periodic board backup with bounded retention")
    parser.add_argument("--config", default=None, help="Path to backup config YAML (optional)")
    parser.add_argument("--once", action="store_true", help="Run a single backup cycle and print its summary")

    args = parser.parse_args()
    try:
        sys.exit(asyncio.run(main(config_path=args.config, once=args.once)))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli()
