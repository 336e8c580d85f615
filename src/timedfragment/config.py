"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (TIMEDFRAGMENT__CACHE__PERFORM_CACHING=false)
  2. timedfragment.yaml     (searched in cwd, then ~/.config/timedfragment/)
  3. Hardcoded defaults

The config file is optional. All fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir("timedfragment")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_CACHE_DIR) / "fragments.db")


def _find_config_file() -> str | None:
    """Return the path of the first timedfragment.yaml found, or None."""
    candidates = [
        Path("timedfragment.yaml"),
        Path.home() / ".config" / "timedfragment" / "timedfragment.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Off means pass-through: every block runs and no store is touched.
    perform_caching: bool = True
    backend: Literal["memory", "sqlite"] = "memory"
    db_path: str = _DEFAULT_DB_PATH


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: TIMEDFRAGMENT__CACHE__BACKEND=sqlite
        env_prefix="TIMEDFRAGMENT__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
        extra="forbid",
    )

    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
