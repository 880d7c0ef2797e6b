"""Domain services for recipient enrichment workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from giftstep.domain.errors import NoEligibleRecipientsError, RemoteServiceError
from giftstep.domain.ports.enrichment import EnrichmentRecord
from giftstep.domain.throttle import Delay, FixedDelay, SequentialTaskQueue

if TYPE_CHECKING:
    from collections.abc import Iterable

    from giftstep.domain.model import ListId, Recipient
    from giftstep.domain.ports.enrichment import EnrichmentLookup, EnrichmentStore

log = getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0


@dataclass(slots=True)
class EnrichmentSummary:
    success_count: int = 0
    failure_count: int = 0
    skipped_count: int = 0
    records: list[EnrichmentRecord] = field(default_factory=list[EnrichmentRecord])


def _usable(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def merge_enrichment(recipient: Recipient, record: EnrichmentRecord) -> Recipient:
    """Return a copy of ``recipient`` with usable enrichment values filled in.

    A failed record changes nothing. Only non-empty strings replace existing
    values, so missing, blank or mistyped provider fields keep what we had.
    """

    merged = recipient.copy()
    if not record.success:
        return merged

    fields = record.fields
    if (company := _usable(fields.company)) is not None:
        merged.company = company
    if (title := _usable(fields.title)) is not None:
        merged.title = title
    if (city := _usable(fields.city)) is not None:
        merged.address.city = city
    if (state := _usable(fields.state)) is not None:
        merged.address.state = state
    if (country := _usable(fields.country)) is not None:
        merged.address.country = country
    return merged


def select_enrichment_candidates(recipients: Iterable[Recipient]) -> list[Recipient]:
    """Recipients with a resolvable external profile handle."""

    return [recipient for recipient in recipients if recipient.linkedin_handle]


class EnrichmentPipeline:
    """Enrich recipients one by one, persisting each result before moving on."""

    def __init__(
        self,
        *,
        lookup: EnrichmentLookup,
        store: EnrichmentStore,
        delay: Delay | None = None,
    ) -> None:
        self._lookup = lookup
        self._store = store
        self._delay = delay or FixedDelay(DEFAULT_DELAY_SECONDS)

    async def enrich(
        self,
        recipients: Iterable[Recipient],
        *,
        list_id: ListId,
    ) -> EnrichmentSummary:
        """Run the batch; individual failures are counted, never raised."""

        recipient_list = list(recipients)
        candidates = select_enrichment_candidates(recipient_list)
        summary = EnrichmentSummary(skipped_count=len(recipient_list) - len(candidates))
        if not candidates:
            raise NoEligibleRecipientsError(
                "None of the selected recipients has a profile handle to enrich"
            )

        for recipient in recipient_list:
            if not recipient.linkedin_handle:
                log.info("Skipping %s - no profile handle available", recipient.id)

        log.info("Starting enrichment for %s recipient(s)", len(candidates))
        queue: SequentialTaskQueue[Recipient, EnrichmentRecord] = SequentialTaskQueue(
            delay=self._delay
        )
        queue.extend(candidates)
        summary.records = await queue.drain(lambda item: self._enrich_one(item, list_id))

        for record in summary.records:
            if record.success:
                summary.success_count += 1
            else:
                summary.failure_count += 1

        log.info(
            "Enrichment finished: success=%s, failed=%s, skipped=%s",
            summary.success_count,
            summary.failure_count,
            summary.skipped_count,
        )
        return summary

    async def _enrich_one(self, recipient: Recipient, list_id: ListId) -> EnrichmentRecord:
        try:
            record = await self._lookup.lookup(recipient)
        except RemoteServiceError as exc:
            log.warning("Enrichment lookup failed for %s: %s", recipient.id, exc)
            return EnrichmentRecord.failed(recipient.id, str(exc))
        if not record.success:
            log.warning("Enrichment lookup failed for %s: %s", recipient.id, record.error)
            return record

        merged = merge_enrichment(recipient, record)
        try:
            await self._store.save_enrichment(list_id, recipient.id, record)
        except RemoteServiceError as exc:
            log.warning("Saving enrichment for %s failed: %s", recipient.id, exc)
            return EnrichmentRecord.failed(recipient.id, f"Failed to save enrichment data: {exc}")

        recipient.overwrite_from(merged)
        log.info("Enriched and saved %s", recipient.id)
        return record
