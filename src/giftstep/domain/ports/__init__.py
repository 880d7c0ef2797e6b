"""Domain port definitions for adapters."""

from __future__ import annotations

from .cache import SNAPSHOT_SCHEMA_VERSION, SelectionCache, SelectionSnapshot
from .campaign import CampaignGateway
from .catalog import ContactListSource
from .enrichment import EnrichmentFields, EnrichmentLookup, EnrichmentRecord, EnrichmentStore

__all__ = [
    "SNAPSHOT_SCHEMA_VERSION",
    "CampaignGateway",
    "ContactListSource",
    "EnrichmentFields",
    "EnrichmentLookup",
    "EnrichmentRecord",
    "EnrichmentStore",
    "SelectionCache",
    "SelectionSnapshot",
]
