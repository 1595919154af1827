"""Configuration schema for the automatic board backup engine."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from board_backup.model.retention_model import RetentionPolicy


class BackupConfig(BaseModel):
    """
    Configuration for automatic board backups.

    Controls whether backups are taken, where boards are read from and
    written to, and the retention policy applied per board.
    """

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for future extensions
    )

    enabled: bool = Field(
        default=True,
        description="Enable/disable automatic backup of boards",
    )

    history_dir: str = Field(
        default="server-data",
        validate_default=True,
        description="Directory where active boards are saved by the persistence layer",
    )

    backup_dir: str = Field(
        default="backups",
        validate_default=True,
        description="Directory where board backups are written to",
    )

    # Retention policy
    copies: int = Field(
        default=10,
        description="Max count of copies to keep of any board. Values < 1 disable backups",
    )

    interval_ms: int = Field(
        default=1000 * 60 * 60 * 24,
        ge=0,
        description="Minimum time between two backups of the same board, in milliseconds",
    )

    file_extension: str = Field(
        default=".json",
        description="Extension of board and backup files",
    )

    # Scheduling / execution
    cycle_interval_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="How often a backup cycle runs, in seconds",
    )

    initial_delay_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Wait before the first cycle after startup, in seconds",
    )

    max_concurrency: int = Field(
        default=16,
        ge=1,
        le=1000,
        description="Max concurrent copy/delete operations within one cycle",
    )

    copy_chunk_size: int = Field(
        default=64 * 1024,
        ge=1024,
        description="Chunk size used when streaming a board into its backup, in bytes",
    )

    # Logging
    log_level: str = Field(default="INFO", description="DEBUG | INFO | WARNING | ERROR")
    log_to_file: bool = Field(default=False)
    log_dir: str = Field(default="logs")

    @field_validator("history_dir", "backup_dir", mode="before")
    @classmethod
    def resolve_dir(cls, v: str | None) -> str:
        if not v:
            raise ValueError("directory path must not be empty")
        return str(Path(v).expanduser().resolve())

    @field_validator("file_extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith("."):
            v = f".{v}"
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def retention_policy(self) -> RetentionPolicy:
        return RetentionPolicy(max_copies=self.copies, min_interval_ms=self.interval_ms)
