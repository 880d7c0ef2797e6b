"""Public interface for the People Data Labs adapter."""

from __future__ import annotations

from .client import EnrichmentLookupError, PeopleDataLabsLookup
from .schema import PersonData, PersonEnrichResponse
from .translator import parse_enrichment, profile_url

__all__ = [
    "EnrichmentLookupError",
    "PeopleDataLabsLookup",
    "PersonData",
    "PersonEnrichResponse",
    "parse_enrichment",
    "profile_url",
]
