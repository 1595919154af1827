from enum import StrEnum


class BackupEventType(StrEnum):
    CYCLE_SUMMARY = "cycle-summary"
    CYCLE_SKIPPED_OVERLAP = "cycle-skipped-overlap"
    CYCLE_ABORTED = "cycle-aborted"
    BACKUP_FAILED = "backup-failed"
    DELETE_FAILED = "delete-failed"


class CycleStatus(StrEnum):
    COMPLETED = "completed"
    SKIPPED_OVERLAP = "skipped_overlap"
    DISABLED = "disabled"
