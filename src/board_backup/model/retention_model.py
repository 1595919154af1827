from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, computed_field

from board_backup.model.backup_record import BackupRecord
from board_backup.model.enum.backup_event_enum import CycleStatus


class RetentionPolicy(BaseModel):
    """
    max_copies:
      Maximum backups retained per board. Values < 1 turn backups off.

    min_interval_ms:
      Minimum age of a board's newest backup before another one is taken.
    """

    model_config = ConfigDict(frozen=True)

    max_copies: int = Field(default=10)
    min_interval_ms: int = Field(default=86_400_000, ge=0)

    @property
    def backups_enabled(self) -> bool:
        return self.max_copies >= 1


@dataclass
class RetentionPlan:
    to_backup: set[str] = field(default_factory=set)
    to_delete: set[BackupRecord] = field(default_factory=set)

    def deletions_for(self, board_id: str) -> list[BackupRecord]:
        return sorted(r for r in self.to_delete if r.board_id == board_id)


class CycleSummary(BaseModel):
    """Outcome of one backup cycle."""

    status: CycleStatus = Field(default=CycleStatus.COMPLETED)
    backed_up: int = Field(default=0, ge=0)
    deleted: int = Field(default=0, ge=0)
    backup_failed: int = Field(default=0, ge=0)
    delete_failed: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return self.backup_failed + self.delete_failed

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "backedUp": self.backed_up,
            "deleted": self.deleted,
            "failed": self.failed,
        }
