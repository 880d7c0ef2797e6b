"""Ports for the remote campaign record."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from giftstep.domain.model import CampaignSnapshot, CommittedRecipient, RecipientId


@runtime_checkable
class CampaignGateway(Protocol):
    """Reads and partially updates the externally owned campaign record."""

    async def fetch_campaign(self, campaign_id: str) -> CampaignSnapshot: ...

    async def fetch_committed_recipients(self, campaign_id: str) -> list[CommittedRecipient]: ...

    async def update_campaign(self, campaign_id: str, payload: Mapping[str, object]) -> None:
        """Merge ``payload`` into the campaign; fields not named are left alone."""
        ...

    async def commit_recipients(
        self, campaign_id: str, contact_ids: Sequence[RecipientId]
    ) -> None: ...


__all__ = ["CampaignGateway"]
