import logging
import os
import re
from typing import Any

import yaml

from board_backup.schema.backup_config_schema import BackupConfig

logger = logging.getLogger(__name__)

# Environment overrides kept compatible with the whiteboard server deployment
ENV_OVERRIDES: dict[str, str] = {
    "WBO_BACKUP_ENABLED": "enabled",
    "WBO_HISTORY_DIR": "history_dir",
    "WBO_BACKUP_DIR": "backup_dir",
    "WBO_BACKUP_COPIES": "copies",
    "WBO_BACKUP_INTERVAL_MS": "interval_ms",
}


class ConfigManager:

    @staticmethod
    def load_yaml_file(path: str) -> dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def parse_env_var_with_default(value: str) -> bool | int | float | str | None:
        match = re.match(r"\$\{(\w+)(?::-([^\}]*))?\}", value)  # Match ${VAR_NAME:-default} or ${VAR_NAME}
        if not match:
            return value

        var_name = match.group(1)
        default_value = match.group(2)

        resolved_value = os.getenv(var_name) or default_value
        if resolved_value is not None:
            return ConfigManager._parse_value_by_type(resolved_value)
        return None

    @staticmethod
    def resolve_env_placeholders(raw: Any) -> Any:
        """Recursively resolve ${VAR:-default} placeholders in a loaded YAML tree."""
        if isinstance(raw, dict):
            return {k: ConfigManager.resolve_env_placeholders(v) for k, v in raw.items()}
        if isinstance(raw, list):
            return [ConfigManager.resolve_env_placeholders(v) for v in raw]
        if isinstance(raw, str):
            return ConfigManager.parse_env_var_with_default(raw)
        return raw

    @staticmethod
    def apply_env_overrides(raw: dict, environ: dict[str, str] | None = None) -> dict:
        env = os.environ if environ is None else environ
        merged = dict(raw)
        for env_name, field_name in ENV_OVERRIDES.items():
            value = env.get(env_name)
            if value is None or value == "":
                continue
            merged[field_name] = value
            logger.debug(f"[Config] {field_name} overridden by {env_name}")
        return merged

    @staticmethod
    def load_backup_config(config_path: str | None = None, environ: dict[str, str] | None = None) -> BackupConfig:
        """
        Load and validate backup configuration.

        Priority (highest first):
        1. WBO_* environment variables
        2. YAML file (with ${VAR:-default} placeholders resolved)
        3. BackupConfig defaults

        Raises:
            FileNotFoundError: config_path given but missing
            pydantic.ValidationError: invalid values
        """
        raw: dict = {}
        if config_path:
            raw = ConfigManager.resolve_env_placeholders(ConfigManager.load_yaml_file(config_path))

        raw = ConfigManager.apply_env_overrides(raw, environ)
        return BackupConfig(**raw)

    @staticmethod
    def _parse_value_by_type(value: str) -> bool | int | float | str:
        if value.lower() in ["true", "false"]:
            return value.lower() == "true"
        if ConfigManager._is_int(value):
            return int(value)
        if ConfigManager._is_float(value):
            return float(value)
        return value

    @staticmethod
    def _is_int(value: str) -> bool:
        try:
            int(value)
            return True
        except ValueError:
            return False

    @staticmethod
    def _is_float(value: str) -> bool:
        try:
            float(value)
            return True
        except ValueError:
            return False
