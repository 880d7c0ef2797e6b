"""Translate People Data Labs payloads into enrichment records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from giftstep.domain.ports.enrichment import EnrichmentFields, EnrichmentRecord

if TYPE_CHECKING:
    from giftstep.domain.model import RecipientId

    from .schema import PersonEnrichResponse

LINKEDIN_PROFILE_TEMPLATE = "https://www.linkedin.com/in/{handle}/"


def profile_url(handle: str) -> str:
    return LINKEDIN_PROFILE_TEMPLATE.format(handle=handle.strip().strip("/"))


def parse_enrichment(recipient_id: RecipientId, response: PersonEnrichResponse) -> EnrichmentRecord:
    data = response.data
    return EnrichmentRecord(
        recipient_id=recipient_id,
        success=True,
        fields=EnrichmentFields(
            company=data.job_company_name,
            title=data.job_title,
            city=data.location_locality,
            state=data.location_region,
            country=data.location_country,
        ),
        data=data.model_dump(mode="json"),
        likelihood=response.likelihood,
    )
