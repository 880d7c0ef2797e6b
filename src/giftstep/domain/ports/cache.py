"""Port for the local selection cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from giftstep.domain.model import CampaignMode

if TYPE_CHECKING:
    from giftstep.domain.model import ListId, RecipientId

SNAPSHOT_SCHEMA_VERSION: Final[int] = 1


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class SelectionSnapshot:
    """What the selection manager writes to the cache after every mutation."""

    campaign_id: str
    active_list_id: ListId | None
    selected_ids: frozenset[RecipientId] = frozenset()
    mode: CampaignMode = CampaignMode.STANDARD
    saved_at: datetime = field(default_factory=_utcnow)
    schema_version: int = SNAPSHOT_SCHEMA_VERSION


@runtime_checkable
class SelectionCache(Protocol):
    """Synchronous key/value cache of selection snapshots keyed by campaign id."""

    def load(self, campaign_id: str) -> SelectionSnapshot | None: ...

    def save(self, snapshot: SelectionSnapshot) -> None: ...

    def clear(self, campaign_id: str) -> None: ...


__all__ = ["SNAPSHOT_SCHEMA_VERSION", "SelectionCache", "SelectionSnapshot"]
