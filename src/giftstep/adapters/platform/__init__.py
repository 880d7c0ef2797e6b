"""Public interface for the campaign platform adapter."""

from __future__ import annotations

from .client import PlatformAPIError, PlatformClient
from .schema import CampaignPayload, ContactListPayload, ContactPayload
from .translator import parse_contact_lists, parse_linkedin_handle, parse_recipient

__all__ = [
    "CampaignPayload",
    "ContactListPayload",
    "ContactPayload",
    "PlatformAPIError",
    "PlatformClient",
    "parse_contact_lists",
    "parse_linkedin_handle",
    "parse_recipient",
]
