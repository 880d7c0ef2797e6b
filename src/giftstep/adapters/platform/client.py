"""HTTP client for the campaign platform API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from giftstep.adapters.http_resilience import ResilientClient, default_client_factory
from giftstep.config.platform import PlatformConfig, get_platform_config
from giftstep.domain.errors import RemoteServiceError
from giftstep.domain.ports.campaign import CampaignGateway
from giftstep.domain.ports.catalog import ContactListSource
from giftstep.domain.ports.enrichment import EnrichmentStore

from .schema import (
    CampaignResponse,
    CommittedRecipientsResponse,
    ContactDetailsResponse,
    ErrorPayload,
    extract_list_payloads,
)
from .translator import (
    parse_campaign,
    parse_committed_recipient,
    parse_contact_lists,
    parse_recipient,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from giftstep.config.http_resilience import ResilienceConfig
    from giftstep.domain.model import (
        CampaignSnapshot,
        CommittedRecipient,
        ContactList,
        ListId,
        Recipient,
        RecipientId,
    )
    from giftstep.domain.ports.enrichment import EnrichmentRecord

log = getLogger(__name__)


class PlatformAPIError(RemoteServiceError):
    """Raised when a platform call fails or returns an unusable payload."""

    @classmethod
    def from_response(cls, response: httpx.Response) -> PlatformAPIError:
        detail: str | None = None
        try:
            detail = ErrorPayload.model_validate(response.json()).detail
        except (ValueError, ValidationError):
            detail = None
        message = str(response.status_code)
        if detail:
            message = f"{message} - {detail}"
        return cls(message, status_code=response.status_code)


@dataclass(slots=True)
class PlatformClient:
    """Contact lists, campaign record and enrichment storage on the platform."""

    config: PlatformConfig = field(default_factory=get_platform_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    @property
    def organization_id(self) -> str:
        return self.config.organization_id

    # -- contact lists ------------------------------------------------------

    async def fetch_general_lists(self) -> list[ContactList]:
        payload = await self._request_json("GET", f"/v1/organizations/{self.organization_id}/lists")
        return self._parse_lists(payload, context_id=None)

    async def fetch_scoped_lists(self, context_id: str) -> list[ContactList]:
        payload = await self._request_json(
            "GET", f"/v1/organizations/{self.organization_id}/events/{context_id}/lists"
        )
        return self._parse_lists(payload, context_id=context_id)

    async def fetch_contacts(self, list_id: ListId) -> list[Recipient]:
        payload = await self._request_json(
            "GET",
            f"/v1/organizations/{self.organization_id}/lists/{list_id}/contacts/details",
        )
        try:
            response = ContactDetailsResponse.model_validate(payload)
        except ValidationError as exc:
            raise PlatformAPIError(f"Invalid contact details payload: {exc}") from exc
        return [parse_recipient(contact) for contact in response.contacts]

    # -- campaign record ----------------------------------------------------

    async def fetch_campaign(self, campaign_id: str) -> CampaignSnapshot:
        payload = await self._request_json(
            "GET", f"/v1/organizations/{self.organization_id}/campaigns/{campaign_id}"
        )
        try:
            response = CampaignResponse.model_validate(payload)
        except ValidationError as exc:
            raise PlatformAPIError(f"Invalid campaign payload: {exc}") from exc
        return parse_campaign(campaign_id, response.campaign)

    async def fetch_committed_recipients(self, campaign_id: str) -> list[CommittedRecipient]:
        payload = await self._request_json("GET", f"/v1/campaigns/{campaign_id}/recipients")
        try:
            response = CommittedRecipientsResponse.model_validate(payload)
        except ValidationError as exc:
            raise PlatformAPIError(f"Invalid recipients payload: {exc}") from exc
        if not response.success:
            raise PlatformAPIError("Campaign recipients request was not successful")
        return [parse_committed_recipient(entry) for entry in response.data]

    async def update_campaign(self, campaign_id: str, payload: Mapping[str, object]) -> None:
        await self._request_json(
            "PUT",
            f"/v1/organizations/{self.organization_id}/campaigns/{campaign_id}",
            json=dict(payload),
        )

    async def commit_recipients(
        self, campaign_id: str, contact_ids: Sequence[RecipientId]
    ) -> None:
        await self._request_json(
            "POST",
            f"/v1/organizations/{self.organization_id}/campaigns/{campaign_id}/contacts/recipients",
            json={"contactIds": list(contact_ids)},
        )

    # -- enrichment storage -------------------------------------------------

    async def save_enrichment(
        self,
        list_id: ListId,
        recipient_id: RecipientId,
        record: EnrichmentRecord,
    ) -> None:
        await self._request_json(
            "PUT",
            f"/v1/organizations/{self.organization_id}/lists/{list_id}"
            f"/contacts/{recipient_id}/enrich",
            json={"enrichmentData": {"data": record.data, "likelihood": record.likelihood}},
        )

    # -- internals ----------------------------------------------------------

    def _parse_lists(self, payload: object, *, context_id: str | None) -> list[ContactList]:
        try:
            return parse_contact_lists(extract_list_payloads(payload), context_id=context_id)
        except (TypeError, ValidationError) as exc:
            raise PlatformAPIError(f"Invalid response format: {exc}") from exc

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        json: object = None,
    ) -> object:
        url = self.config.resilience.url(path)
        async with self.client_factory(self.config.resilience) as client:
            try:
                if json is None:
                    response = await client.request(method, url)
                else:
                    response = await client.request(method, url, json=json)
            except httpx.HTTPError as exc:
                log.warning("%s %s failed: %s", method, path, exc)
                raise PlatformAPIError(str(exc) or type(exc).__name__) from exc

            if response.is_error:
                error = PlatformAPIError.from_response(response)
                log.warning("%s %s returned %s", method, path, error)
                raise error

            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise PlatformAPIError(f"Invalid JSON from {path}: {exc}") from exc


if TYPE_CHECKING:
    _source_check: ContactListSource = PlatformClient()
    _gateway_check: CampaignGateway = PlatformClient()
    _store_check: EnrichmentStore = PlatformClient()
