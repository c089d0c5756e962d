from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from attr_audit.config.schema import AuditConfig, AuditOptions, ProjectSettings
from attr_audit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    "attr-audit.config.json",
    ".attr-audit.config.json",
)
PYPROJECT_TABLE = "attr-audit"


class ConfigLoader:
    """Loads and validates attribute audit configuration."""

    @staticmethod
    def load(path: str | Path) -> AuditConfig:
        config_path = Path(path)
        try:
            with config_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
            return AuditConfig.model_validate(payload)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise ConfigError(f"Could not load config file {config_path}: {exc}") from exc

    @classmethod
    def discover(cls, working_dir: str | Path | None = None) -> AuditConfig | None:
        root = Path(working_dir) if working_dir is not None else Path.cwd()
        for name in CONFIG_FILE_NAMES:
            candidate = root / name
            if candidate.is_file():
                logger.debug("Using config file %s", candidate)
                return cls.load(candidate)
        return None

    @staticmethod
    def read_project_settings(working_dir: str | Path | None = None) -> ProjectSettings:
        root = Path(working_dir) if working_dir is not None else Path.cwd()
        pyproject = root / "pyproject.toml"
        if not pyproject.is_file():
            return ProjectSettings()
        try:
            with pyproject.open("rb") as handle:
                document = tomllib.load(handle)
            table = document.get("tool", {}).get(PYPROJECT_TABLE, {})
            return ProjectSettings.model_validate(
                {key.replace("-", "_"): value for key, value in table.items()}
            )
        except (OSError, tomllib.TOMLDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable project settings in %s: %s", pyproject, exc)
            return ProjectSettings()

    @staticmethod
    def merge(base: AuditOptions | None, overrides: dict[str, Any]) -> AuditOptions:
        """Applies non-``None`` overrides on top of file options, which sit on top of defaults."""

        payload = base.model_dump(exclude_unset=True) if base is not None else {}
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return AuditOptions.model_validate(payload)
