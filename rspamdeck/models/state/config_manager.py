"""Settings persistence backed by a YAML file."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from rspamdeck.models.state.app_settings import (
    AppSettings,
    ConfigLoadError,
    ConfigSaveError,
)

logger = logging.getLogger(__name__)


class ConfigManager:
    """Load and save AppSettings as YAML."""

    DEFAULT_PATH = Path("~/.config/rspamdeck/settings.yaml")

    @classmethod
    def resolve_path(cls, path: Path | str | None = None) -> Path:
        return Path(path or cls.DEFAULT_PATH).expanduser()

    @classmethod
    def load(cls, path: Path | str | None = None) -> AppSettings:
        """Load settings, falling back to defaults when the file is missing.

        Raises:
            ConfigLoadError: The file exists but cannot be parsed or validated.
        """
        config_path = cls.resolve_path(path)
        if not config_path.exists():
            logger.debug("No settings file at %s, using defaults", config_path)
            return AppSettings()

        try:
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(f"Cannot read {config_path}: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigLoadError(f"{config_path} must contain a mapping")

        try:
            return AppSettings.model_validate(raw)
        except ValidationError as exc:
            raise ConfigLoadError(f"Invalid settings in {config_path}: {exc}") from exc

    @classmethod
    def save(cls, settings: AppSettings, path: Path | str | None = None) -> Path:
        """Write settings to disk and return the path written."""
        config_path = cls.resolve_path(path)
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(
                yaml.safe_dump(settings.model_dump(), sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise ConfigSaveError(f"Cannot write {config_path}: {exc}") from exc
        logger.info("Settings saved to %s", config_path)
        return config_path
