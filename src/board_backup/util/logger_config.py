import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TextIO

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

HANDLER_PREFIX = "board_backup."
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


class ISO8601Formatter(logging.Formatter):
    def formatTime(self, record, datefmt=None):
        dt: datetime = datetime.fromtimestamp(record.created)
        return dt.isoformat(timespec="seconds")


def setup_logging(
    log_level: int | str = logging.INFO,
    log_to_file: bool = False,
    log_dir: str = "logs",
    stream: TextIO | None = None,
    log_base_filename: str = "board_backup",
    when: str = "midnight",
    backup_count: int = 7,
) -> None:
    """
    Configure the root logger for the backup service.

    Console records go to `stream` (stdout when omitted). The single-cycle
    mode passes stderr so stdout carries only the JSON summary.

    Handlers installed by an earlier call are replaced, so the process can
    switch streams; handlers added by anything else are left in place.
    """
    if isinstance(log_level, str):
        log_level = LOG_LEVEL_MAP.get(log_level.upper(), logging.INFO)

    formatter = ISO8601Formatter(fmt=LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    remove_handlers(root_logger)

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.set_name(f"{HANDLER_PREFIX}console")
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler (rotating daily)
    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)

        rotating_handler = TimedRotatingFileHandler(
            filename=f"{log_dir}/{log_base_filename}.log",
            when=when,
            interval=1,
            backupCount=backup_count,
            encoding="utf-8",
            utc=False,
        )
        rotating_handler.set_name(f"{HANDLER_PREFIX}file")
        rotating_handler.setFormatter(formatter)
        root_logger.addHandler(rotating_handler)


def remove_handlers(root_logger: logging.Logger | None = None) -> None:
    """Detach and close the handlers installed by `setup_logging`."""
    root_logger = root_logger or logging.getLogger()
    for handler in list(root_logger.handlers):
        if (handler.get_name() or "").startswith(HANDLER_PREFIX):
            root_logger.removeHandler(handler)
            handler.close()
