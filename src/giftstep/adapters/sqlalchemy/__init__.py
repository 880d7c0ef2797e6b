"""SQLAlchemy adapter package for giftstep."""

from __future__ import annotations

from .cache import SqlAlchemySelectionCache, StartupError, shutdown, startup
from .mappings import UTCDateTime, create_all_tables, mapper_registry, selection_cache_table

__all__ = [
    "SqlAlchemySelectionCache",
    "StartupError",
    "UTCDateTime",
    "create_all_tables",
    "mapper_registry",
    "selection_cache_table",
    "shutdown",
    "startup",
]
