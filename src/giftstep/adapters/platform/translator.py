"""Translate campaign platform payloads into domain entities."""

from __future__ import annotations

from datetime import UTC
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from giftstep.domain.model import (
    Address,
    CampaignSnapshot,
    CommittedRecipient,
    ContactList,
    Recipient,
)

from .schema import ContactListPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import (
        AddressPayload,
        CampaignPayload,
        CommittedRecipientPayload,
        ContactPayload,
    )

log = getLogger(__name__)

UNNAMED_LIST = "Unnamed List"
DEFAULT_LIST_STATUS = "active"
_PROFILE_MARKER = "/in/"


def parse_linkedin_handle(profile_url: str | None) -> str | None:
    """Return the path segment after ``/in/`` of a profile URL, if any."""

    if not profile_url or _PROFILE_MARKER not in profile_url:
        return None
    path = urlsplit(profile_url).path if "://" in profile_url else profile_url
    if _PROFILE_MARKER not in path:
        return None
    handle = path.split(_PROFILE_MARKER, 1)[1].split("/", 1)[0]
    handle = handle.split("?", 1)[0].strip()
    return handle or None


def parse_contact_list(payload: ContactListPayload, *, context_id: str | None = None) -> ContactList:
    created_at = payload.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return ContactList(
        id=payload.id,
        name=payload.name or UNNAMED_LIST,
        description=payload.description or "",
        recipient_count=payload.resolved_recipient_count(),
        tags=tuple(payload.tags),
        created_at=created_at,
        status=payload.status or DEFAULT_LIST_STATUS,
        context_id=context_id,
    )


def parse_contact_lists(
    raw_lists: Iterable[object],
    *,
    context_id: str | None = None,
) -> list[ContactList]:
    lists: list[ContactList] = []
    for raw in raw_lists:
        payload = ContactListPayload.model_validate(raw)
        if payload.is_deleted_list:
            log.debug("Skipping deleted contact list %s", payload.id)
            continue
        if not payload.id:
            log.warning("Skipping contact list without an id: %s", payload.name)
            continue
        lists.append(parse_contact_list(payload, context_id=context_id))
    return lists


def _parse_address(payload: AddressPayload | None) -> Address:
    if payload is None:
        return Address()
    return Address(
        line1=payload.line1,
        line2=payload.line2,
        city=payload.city,
        state=payload.state,
        zip=payload.zip,
        country=payload.country,
        is_verified=payload.is_verified,
        confidence_score=payload.confidence_score,
    )


def parse_recipient(payload: ContactPayload) -> Recipient:
    return Recipient(
        id=payload.id,
        name=f"{payload.first_name} {payload.last_name}".strip(),
        email=payload.mail_id,
        company=payload.company_name,
        title=payload.job_title,
        linkedin_handle=parse_linkedin_handle(payload.linkedin_url),
        address=_parse_address(payload.address),
    )


def parse_campaign(campaign_id: str, payload: CampaignPayload) -> CampaignSnapshot:
    updated_at = payload.updated_at
    if updated_at is not None and updated_at.tzinfo is None:
        updated_at = updated_at.replace(tzinfo=UTC)
    return CampaignSnapshot(
        campaign_id=payload.id or campaign_id,
        motion=payload.motion,
        total_recipients=payload.total_recipients,
        budget=payload.budget,
        boost_registration=payload.boost_registration,
        updated_at=updated_at,
    )


def parse_committed_recipient(payload: CommittedRecipientPayload) -> CommittedRecipient:
    return CommittedRecipient(
        contact_id=payload.contact_id,
        record_id=payload.record_id,
        email=payload.email,
        name=f"{payload.first_name} {payload.last_name}".strip(),
    )
