"""SQLAlchemy-backed selection cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from giftstep.adapters.snapshot import decode_snapshot, encode_snapshot
from giftstep.config.storage import get_database_config
from giftstep.domain.ports.cache import SelectionCache

from .mappings import create_all_tables, selection_cache_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from giftstep.domain.ports.cache import SelectionSnapshot

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy cache is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Initialise the engine and create the cache table."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )
    if _STATE.engine is not None:
        _STATE.engine.dispose()

    if engine is None:
        database = get_database_config()
        engine = create_engine(database_uri or database.uri, echo=database.echo, future=True)
    create_all_tables(engine)
    _STATE.engine = engine
    return engine


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemySelectionCache:
    """One row per campaign holding the encoded snapshot."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        engine = self._engine or _STATE.engine
        if engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call giftstep.adapters.sqlalchemy."
                "cache.startup() or pass an engine."
            )
        return engine

    def load(self, campaign_id: str) -> SelectionSnapshot | None:
        statement = select(selection_cache_table.c.payload).where(
            selection_cache_table.c.campaign_id == campaign_id
        )
        with self.engine.connect() as connection:
            payload = connection.execute(statement).scalar_one_or_none()
        if payload is None:
            return None
        return decode_snapshot(payload, campaign_id)

    def save(self, snapshot: SelectionSnapshot) -> None:
        values = {
            "campaign_id": snapshot.campaign_id,
            "payload": encode_snapshot(snapshot),
            "updated_at": datetime.now(UTC),
        }
        engine = self.engine
        with engine.begin() as connection:
            if engine.dialect.name == "sqlite":
                statement = sqlite_insert(selection_cache_table).values(**values)
                connection.execute(
                    statement.on_conflict_do_update(
                        index_elements=[selection_cache_table.c.campaign_id],
                        set_={
                            "payload": statement.excluded.payload,
                            "updated_at": statement.excluded.updated_at,
                        },
                    )
                )
                return
            connection.execute(
                delete(selection_cache_table).where(
                    selection_cache_table.c.campaign_id == snapshot.campaign_id
                )
            )
            connection.execute(selection_cache_table.insert().values(**values))

    def clear(self, campaign_id: str) -> None:
        with self.engine.begin() as connection:
            connection.execute(
                delete(selection_cache_table).where(
                    selection_cache_table.c.campaign_id == campaign_id
                )
            )
        log.debug("Cleared cached selection for %s", campaign_id)


if TYPE_CHECKING:
    _cache_check: SelectionCache = SqlAlchemySelectionCache()
