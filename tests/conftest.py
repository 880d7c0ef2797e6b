from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from giftstep.adapters.memory import InMemorySelectionCache
from giftstep.adapters.sqlalchemy import create_all_tables
from giftstep.domain.notices import Notices

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def notices() -> Notices:
    return Notices()


@pytest.fixture
def memory_cache() -> InMemorySelectionCache:
    return InMemorySelectionCache()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()
