"""Where giftstep keeps its local files: the selection cache database and the HTTP cache."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "giftstep"
DEFAULT_DB_FILENAME: Final[str] = "giftstep.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """A data directory; it is created on first use of any path below it."""

    data_dir: Path

    @property
    def root(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def file(self, name: str) -> Path:
        root = self.root
        root.mkdir(parents=True, exist_ok=True)
        return root / name

    def database_path(self) -> Path:
        return self.file(DEFAULT_DB_FILENAME)

    def http_cache_path(self) -> Path:
        return self.file(HTTP_CACHE_FILENAME)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _platform_data_home() -> Path:
    if sys.platform == "win32":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    override = os.getenv("GIFTSTEP_DATA_DIR")
    if override:
        return StorageConfig(data_dir=Path(override))
    return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """``DATABASE_URI`` wins over the SQLite file in the data directory."""

    echo = os.getenv("GIFTSTEP_SQL_ECHO", "").strip().lower() in {"1", "true", "yes"}
    uri = os.getenv("DATABASE_URI")
    if not uri:
        database_path = (storage or get_storage_config()).database_path()
        uri = f"sqlite+pysqlite:///{database_path}"
    return DatabaseConfig(uri=uri, echo=echo)
