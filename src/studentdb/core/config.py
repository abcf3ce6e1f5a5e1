"""Store configuration with ``STUDENTDB_*`` environment overrides."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "MEMORY_DB",
    "StoreConfig",
    "load_config",
    "reload",
    "get_data_directory",
]

MEMORY_DB = ":memory:"

_ENV_NAME = "STUDENTDB_NAME"
_ENV_VERSION = "STUDENTDB_VERSION"
_ENV_POOL_SIZE = "STUDENTDB_POOL_SIZE"

_ENV_BY_FIELD = {"name": _ENV_NAME, "version": _ENV_VERSION, "pool_size": _ENV_POOL_SIZE}


class StoreConfig(BaseModel):
    """Construction-time options for the store and its repositories."""

    model_config = ConfigDict(frozen=True)

    name: str = "student_db"
    version: int = Field(default=1, ge=1)
    pool_size: int = Field(default=2, ge=1)

    @field_validator("name")
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must be a non-empty file name")
        return value.strip()

    @property
    def in_memory(self) -> bool:
        return self.name == MEMORY_DB

    def database_path(self, location: str | os.PathLike[str] | None = None) -> str:
        """Resolve the database file for ``location`` (a directory)."""

        if self.in_memory:
            return MEMORY_DB
        base = Path(location) if location is not None else get_data_directory()
        return (base / self.name).as_posix()


def _parse_int(env: Mapping[str, str], key: str) -> int | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _from_env(env: Mapping[str, str]) -> StoreConfig:
    values: dict[str, object] = {}
    name = env.get(_ENV_NAME, "").strip()
    if name:
        values["name"] = name
    version = _parse_int(env, _ENV_VERSION)
    if version is not None:
        values["version"] = version
    pool_size = _parse_int(env, _ENV_POOL_SIZE)
    if pool_size is not None:
        values["pool_size"] = pool_size
    try:
        return StoreConfig(**values)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        key = _ENV_BY_FIELD.get(field, field)
        raise ValueError(f"{key}={values.get(field)!r} is invalid: {error['msg']}") from None


@lru_cache(maxsize=1)
def _cached_config() -> StoreConfig:
    return _from_env(os.environ)


def reload() -> None:
    """Clear the cached configuration (useful for tests)."""

    _cached_config.cache_clear()


def load_config(env: Mapping[str, str] | None = None) -> StoreConfig:
    """Return the configuration, applying overrides from ``env`` or ``os.environ``."""

    if env is not None:
        return _from_env(env)
    return _cached_config()


def get_data_directory(app_name: str = "StudentDB") -> Path:
    """
    Get platform-specific data directory.

    - Windows: %LOCALAPPDATA%\\AppName
    - macOS: ~/Library/Application Support/AppName
    - Linux: ~/.local/share/AppName
    """
    home = Path.home()

    if sys.platform == "win32":
        base = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return base / app_name

    elif sys.platform == "darwin":
        return home / "Library" / "Application Support" / app_name

    else:
        xdg_data_home = os.environ.get("XDG_DATA_HOME", home / ".local" / "share")
        return Path(xdg_data_home) / app_name
