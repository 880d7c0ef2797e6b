"""Domain model for the campaign recipient step."""

from __future__ import annotations

from .budget import Budget, money_to_json
from .campaign import CampaignSnapshot, CommittedRecipient
from .enums import (
    BOOST_REGISTRATION_MOTION,
    CampaignMode,
    NoticeScope,
    RemotePrecedence,
)
from .recipient import Address, ContactList, ListId, Recipient, RecipientId

__all__ = [
    "BOOST_REGISTRATION_MOTION",
    "Address",
    "Budget",
    "CampaignMode",
    "CampaignSnapshot",
    "CommittedRecipient",
    "ContactList",
    "ListId",
    "NoticeScope",
    "Recipient",
    "RecipientId",
    "RemotePrecedence",
    "money_to_json",
]
