import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from board_backup.model.enum.backup_event_enum import BackupEventType

logger = logging.getLogger("BackupEvents")


class BackupEvent(BaseModel):
    event: BackupEventType
    fields: dict[str, Any] = Field(default_factory=dict)


class BackupEventSink(ABC):
    """Receives structured events from the backup engine. Transport is up to the implementation."""

    @abstractmethod
    def emit(self, event: BackupEvent) -> None:
        raise NotImplementedError

    def emit_event(self, event_type: BackupEventType, **fields: Any) -> None:
        self.emit(BackupEvent(event=event_type, fields=fields))


class LoggingEventSink(BackupEventSink):
    """
    Forward events to the stdlib logging tree.

    The event type and fields are attached to each record as `event` / `fields`
    so structured handlers can pick them up.
    """

    LEVELS: dict[BackupEventType, int] = {
        BackupEventType.CYCLE_SUMMARY: logging.INFO,
        BackupEventType.CYCLE_SKIPPED_OVERLAP: logging.WARNING,
        BackupEventType.CYCLE_ABORTED: logging.ERROR,
        BackupEventType.BACKUP_FAILED: logging.WARNING,
        BackupEventType.DELETE_FAILED: logging.WARNING,
    }

    def __init__(self, target: logging.Logger | None = None):
        self._logger = target or logger

    def emit(self, event: BackupEvent) -> None:
        level = self.LEVELS.get(event.event, logging.INFO)
        details = " ".join(f"{k}={v}" for k, v in event.fields.items())
        self._logger.log(
            level,
            f"[BackupEvent] {event.event.value} {details}".rstrip(),
            extra={"event": event.event.value, "fields": dict(event.fields)},
        )


class RecordingEventSink(BackupEventSink):
    """Keeps emitted events in memory, optionally forwarding to another sink."""

    def __init__(self, forward_to: BackupEventSink | None = None):
        self.events: list[BackupEvent] = []
        self._forward_to = forward_to

    def emit(self, event: BackupEvent) -> None:
        self.events.append(event)
        if self._forward_to:
            self._forward_to.emit(event)

    def of_type(self, event_type: BackupEventType) -> list[BackupEvent]:
        return [e for e in self.events if e.event == event_type]
