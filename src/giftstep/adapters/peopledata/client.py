"""HTTP client for the People Data Labs person enrichment API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from giftstep.adapters.http_resilience import ResilientClient, default_client_factory
from giftstep.config.enrichment import EnrichmentConfig, get_enrichment_config
from giftstep.domain.errors import RemoteServiceError
from giftstep.domain.ports.enrichment import EnrichmentLookup, EnrichmentRecord

from .schema import ErrorResponse, PersonEnrichResponse
from .translator import parse_enrichment, profile_url

if TYPE_CHECKING:
    from collections.abc import Callable

    from giftstep.config.http_resilience import ResilienceConfig
    from giftstep.domain.model import Recipient

log = getLogger(__name__)

ENRICH_PATH = "/person/enrich"
_NOT_FOUND = 404


class EnrichmentLookupError(RemoteServiceError):
    """Raised when the enrichment API call fails or returns an unusable payload."""


@dataclass(slots=True)
class PeopleDataLabsLookup:
    """Resolve recipients to person records by their profile handle."""

    config: EnrichmentConfig = field(default_factory=get_enrichment_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def __aenter__(self) -> PeopleDataLabsLookup:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def lookup(self, recipient: Recipient) -> EnrichmentRecord:
        if not recipient.linkedin_handle:
            return EnrichmentRecord.failed(recipient.id, "No profile handle available")

        params = httpx.QueryParams(
            {
                "profile": profile_url(recipient.linkedin_handle),
                "pretty": "false",
                "min_likelihood": self.config.min_likelihood,
                "include_if_matched": "false",
                "titlecase": "false",
            }
        )
        # reused across lookups so the limiter and the cache span the batch
        client = self._ensure_client()
        try:
            response = await client.get(self.config.resilience.url(ENRICH_PATH), params=params)
        except httpx.HTTPError as exc:
            raise EnrichmentLookupError(f"PDL API error: {exc}") from exc

        if response.status_code == _NOT_FOUND:
            log.info("No matching profile for %s", recipient.id)
            return EnrichmentRecord.failed(recipient.id, "PDL API error: 404 - no matching profile")
        if response.is_error:
            raise EnrichmentLookupError(
                _error_message(response), status_code=response.status_code
            )

        try:
            payload = PersonEnrichResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise EnrichmentLookupError(f"Invalid PDL payload: {exc}") from exc
        return parse_enrichment(recipient.id, payload)

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.config.resilience)
        return self._client


def _error_message(response: httpx.Response) -> str:
    message = f"PDL API error: {response.status_code}"
    try:
        error = ErrorResponse.model_validate(response.json()).error
    except (ValueError, ValidationError):
        return message
    if error is not None and error.message:
        return f"{message} - {error.message}"
    return message


if TYPE_CHECKING:
    _lookup_check: EnrichmentLookup = PeopleDataLabsLookup()
