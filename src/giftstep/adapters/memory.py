"""Process-local selection cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from giftstep.adapters.snapshot import decode_snapshot, encode_snapshot
from giftstep.domain.ports.cache import SelectionCache

if TYPE_CHECKING:
    from giftstep.domain.ports.cache import SelectionSnapshot


class InMemorySelectionCache:
    """Keeps encoded blobs in a dict so reads go through the same validation as disk."""

    def __init__(self, blobs: dict[str, object] | None = None) -> None:
        self.blobs: dict[str, object] = blobs if blobs is not None else {}

    def load(self, campaign_id: str) -> SelectionSnapshot | None:
        blob = self.blobs.get(campaign_id)
        if blob is None:
            return None
        return decode_snapshot(blob, campaign_id)

    def save(self, snapshot: SelectionSnapshot) -> None:
        self.blobs[snapshot.campaign_id] = encode_snapshot(snapshot)

    def clear(self, campaign_id: str) -> None:
        self.blobs.pop(campaign_id, None)


if TYPE_CHECKING:
    _cache_check: SelectionCache = InMemorySelectionCache()
