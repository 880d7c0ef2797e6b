"""Read-side view of the remote campaign record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import BOOST_REGISTRATION_MOTION, CampaignMode

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True)
class CampaignSnapshot:
    """Fields of the remote campaign this step reads before writing."""

    campaign_id: str
    motion: str | None = None
    total_recipients: int = 0
    budget: dict[str, object] | None = None
    boost_registration: dict[str, object] | None = None
    updated_at: datetime | None = None
    extra: dict[str, object] = field(default_factory=dict[str, object])

    @property
    def mode(self) -> CampaignMode:
        return CampaignMode.from_motion(self.motion)

    @property
    def is_boost_registration(self) -> bool:
        return self.motion == BOOST_REGISTRATION_MOTION


@dataclass(frozen=True, slots=True)
class CommittedRecipient:
    """A recipient already persisted against the campaign remotely."""

    contact_id: str | None
    record_id: str | None = None
    email: str | None = None
    name: str = ""
