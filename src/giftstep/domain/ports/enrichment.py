"""Port definitions for identity enrichment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from giftstep.domain.model import ListId, Recipient, RecipientId


@dataclass(frozen=True, slots=True)
class EnrichmentFields:
    """Partial recipient overlay returned by the enrichment service.

    Values are kept as received; the merge step decides which are usable.
    """

    company: object = None
    title: object = None
    city: object = None
    state: object = None
    country: object = None


@dataclass(frozen=True, slots=True)
class EnrichmentRecord:
    """Outcome of one lookup for one recipient."""

    recipient_id: RecipientId
    success: bool
    fields: EnrichmentFields = field(default_factory=EnrichmentFields)
    error: str | None = None
    data: dict[str, object] = field(default_factory=dict[str, object])
    likelihood: int | None = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("successful enrichment record cannot carry an error")
        if not self.success and not self.error:
            raise ValueError("failed enrichment record requires an error")

    @classmethod
    def failed(cls, recipient_id: RecipientId, error: str) -> EnrichmentRecord:
        return cls(recipient_id=recipient_id, success=False, error=error)


@runtime_checkable
class EnrichmentLookup(Protocol):
    """Looks a recipient up by external profile handle.

    Implementations raise ``RemoteServiceError`` on HTTP-level failures.
    """

    async def lookup(self, recipient: Recipient) -> EnrichmentRecord: ...


@runtime_checkable
class EnrichmentStore(Protocol):
    """Persists enrichment results against a contact of a list."""

    async def save_enrichment(
        self,
        list_id: ListId,
        recipient_id: RecipientId,
        record: EnrichmentRecord,
    ) -> None: ...


__all__ = ["EnrichmentFields", "EnrichmentLookup", "EnrichmentRecord", "EnrichmentStore"]
