"""Versioned JSON encoding of selection snapshots.

Blobs written by this module carry ``schemaVersion``. Blobs without it are the
legacy format that stored the selected recipients by display name; those are
migrated on read by looking the names up in the blob's own recipients array.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from logging import getLogger
from typing import cast

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, ValidationError

from giftstep.domain.model import CampaignMode
from giftstep.domain.ports.cache import SNAPSHOT_SCHEMA_VERSION, SelectionSnapshot

log = getLogger(__name__)

LEGACY_LIST_KEY = "selectedContactListId"
VERSION_KEY = "schemaVersion"


class SnapshotBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SnapshotPayload(SnapshotBaseModel):
    schema_version: int = Field(alias="schemaVersion")
    campaign_id: str = Field(alias="campaignId")
    active_list_id: str | None = Field(default=None, alias="activeListId")
    selected_ids: list[str] = Field(default_factory=list[str], alias="selectedIds")
    mode: CampaignMode = CampaignMode.STANDARD
    saved_at: AwareDatetime = Field(alias="savedAt")


class LegacyRecipientPayload(SnapshotBaseModel):
    id: str
    name: str = ""


class LegacySnapshotPayload(SnapshotBaseModel):
    selected_contact_list_id: str | None = Field(default=None, alias="selectedContactListId")
    selected_recipients: list[str] = Field(default_factory=list[str], alias="selectedRecipients")
    recipients: list[LegacyRecipientPayload] = Field(
        default_factory=list[LegacyRecipientPayload]
    )
    motion: str | None = None


def encode_snapshot(snapshot: SelectionSnapshot) -> dict[str, object]:
    payload = SnapshotPayload(
        schema_version=snapshot.schema_version,
        campaign_id=snapshot.campaign_id,
        active_list_id=snapshot.active_list_id,
        selected_ids=sorted(snapshot.selected_ids),
        mode=snapshot.mode,
        saved_at=snapshot.saved_at,
    )
    return payload.model_dump(mode="json", by_alias=True)


def decode_snapshot(payload: object, campaign_id: str) -> SelectionSnapshot | None:
    """Validate a stored blob; return ``None`` for anything unusable."""

    if not isinstance(payload, Mapping):
        log.warning("Ignoring cached selection for %s: not an object", campaign_id)
        return None
    mapping = cast(Mapping[str, object], payload)
    if VERSION_KEY not in mapping:
        if LEGACY_LIST_KEY in mapping:
            return _migrate_legacy(mapping, campaign_id)
        log.warning("Ignoring cached selection for %s: unknown format", campaign_id)
        return None

    try:
        validated = SnapshotPayload.model_validate(mapping)
    except ValidationError as exc:
        log.warning("Ignoring malformed cached selection for %s: %s", campaign_id, exc)
        return None

    if validated.schema_version > SNAPSHOT_SCHEMA_VERSION:
        log.warning(
            "Ignoring cached selection for %s: schema version %s is newer than %s",
            campaign_id,
            validated.schema_version,
            SNAPSHOT_SCHEMA_VERSION,
        )
        return None
    if validated.campaign_id != campaign_id:
        log.warning(
            "Ignoring cached selection: stored for campaign %s, requested %s",
            validated.campaign_id,
            campaign_id,
        )
        return None

    return SelectionSnapshot(
        campaign_id=validated.campaign_id,
        active_list_id=validated.active_list_id,
        selected_ids=frozenset(validated.selected_ids),
        mode=validated.mode,
        saved_at=validated.saved_at.astimezone(UTC),
        schema_version=SNAPSHOT_SCHEMA_VERSION,
    )


def _migrate_legacy(mapping: Mapping[str, object], campaign_id: str) -> SelectionSnapshot | None:
    try:
        legacy = LegacySnapshotPayload.model_validate(mapping)
    except ValidationError as exc:
        log.warning("Ignoring malformed legacy selection for %s: %s", campaign_id, exc)
        return None

    ids_by_name: dict[str, list[str]] = {}
    for recipient in legacy.recipients:
        ids_by_name.setdefault(recipient.name, []).append(recipient.id)

    selected: set[str] = set()
    for name in legacy.selected_recipients:
        matches = ids_by_name.get(name)
        if not matches:
            log.info("Dropping legacy selection %r for %s: no matching recipient", name, campaign_id)
            continue
        selected.update(matches)

    log.info("Migrated legacy cached selection for %s (%s ids)", campaign_id, len(selected))
    return SelectionSnapshot(
        campaign_id=campaign_id,
        active_list_id=legacy.selected_contact_list_id or None,
        selected_ids=frozenset(selected),
        mode=CampaignMode.from_motion(legacy.motion),
        # legacy blobs carry no timestamp, so any remote record counts as newer
        saved_at=datetime.min.replace(tzinfo=UTC),
    )
