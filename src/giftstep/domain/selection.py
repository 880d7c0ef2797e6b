"""Selection state for the recipient step.

The manager is the only writer of the in-memory selection and of the local
selection cache. Every mutation updates both before control returns to the
event loop, so the cache never lags the selection by more than one call.

Three sources are reconciled on start-up:

- the local cache (last selection made on this machine),
- the remote campaign record (recipients already committed),
- the contents of the list that is loaded.

Remote committed recipients win over the cache according to the configured
``RemotePrecedence``.
"""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from giftstep.domain.errors import RemoteServiceError, UnknownRecipientError
from giftstep.domain.model import CampaignMode, NoticeScope, RemotePrecedence
from giftstep.domain.ports.cache import SelectionSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from giftstep.domain.contact_lists import ContactListRegistry
    from giftstep.domain.model import (
        CampaignSnapshot,
        CommittedRecipient,
        ListId,
        Recipient,
        RecipientId,
    )
    from giftstep.domain.notices import Notices
    from giftstep.domain.ports.cache import SelectionCache
    from giftstep.domain.ports.campaign import CampaignGateway

log = getLogger(__name__)

DEFAULT_DESIRED_COUNT = 100


def _contains(value: str, needle: str) -> bool:
    return needle in value.lower()


def filter_recipients(
    recipients: Iterable[Recipient],
    search_term: str = "",
    company_filter: str = "",
    title_filter: str = "",
) -> list[Recipient]:
    """Case-insensitive substring filter; all given filters must match."""

    search = search_term.strip().lower()
    company = company_filter.strip().lower()
    title = title_filter.strip().lower()

    matches: list[Recipient] = []
    for recipient in recipients:
        if search and not any(
            _contains(value, search)
            for value in (recipient.name, recipient.email, recipient.company, recipient.title)
        ):
            continue
        if company and not _contains(recipient.company, company):
            continue
        if title and not _contains(recipient.title, title):
            continue
        matches.append(recipient)
    return matches


class SelectionStateManager:
    """Owns the selected recipient ids, the active list and the selection cache."""

    def __init__(
        self,
        *,
        registry: ContactListRegistry,
        cache: SelectionCache,
        campaigns: CampaignGateway,
        notices: Notices,
        precedence: RemotePrecedence = RemotePrecedence.ALWAYS,
        default_desired_count: int = DEFAULT_DESIRED_COUNT,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._campaigns = campaigns
        self._notices = notices
        self._precedence = precedence

        self.campaign_id: str | None = None
        self.campaign: CampaignSnapshot | None = None
        self.active_list_id: ListId | None = None
        self.select_all = False
        self.mode = CampaignMode.STANDARD
        self.desired_count = default_desired_count

        self._selected: set[RecipientId] = set()
        self._recipients: list[Recipient] = []
        self._generation = 0

    # -- read side ----------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def selected_ids(self) -> frozenset[RecipientId]:
        return frozenset(self._selected)

    @property
    def recipients(self) -> list[Recipient]:
        return list(self._recipients)

    @property
    def selected_recipients(self) -> list[Recipient]:
        return [recipient for recipient in self._recipients if recipient.id in self._selected]

    def filter(
        self,
        recipients: Iterable[Recipient] | None = None,
        search_term: str = "",
        company_filter: str = "",
        title_filter: str = "",
    ) -> list[Recipient]:
        source = self._recipients if recipients is None else recipients
        return filter_recipients(source, search_term, company_filter, title_filter)

    # -- lifecycle ----------------------------------------------------------

    async def initialize(self, campaign_id: str) -> None:
        """Rebuild the selection from the cache, the scoped lists and the remote record.

        Network failures are reported as notices and never raised.
        """

        self.campaign_id = campaign_id
        snapshot = self._cache.load(campaign_id)

        if snapshot is not None and snapshot.active_list_id is not None:
            self.mode = snapshot.mode
            await self._restore_cached_list(snapshot, snapshot.active_list_id)
        else:
            scoped = self._registry.scoped_lists
            if len(scoped) == 1:
                log.info("Auto-selecting the only context-scoped list %s", scoped[0].id)
                await self.select_list(scoped[0].id)

        await self._overlay_remote(snapshot)

    async def select_list(self, list_id: ListId) -> list[Recipient] | None:
        """Switch to ``list_id`` with an empty selection and load its contacts.

        Returns the loaded recipients, or ``None`` when the load failed or was
        overtaken by a later switch.
        """

        self._require_campaign()
        self._generation += 1
        generation = self._generation

        self.active_list_id = list_id
        self._recipients = []
        self._selected.clear()
        self.select_all = False
        self._persist()
        self._notices.dismiss(NoticeScope.RECIPIENT_TABLE)

        try:
            recipients = await self._registry.load_contacts(list_id)
        except RemoteServiceError as exc:
            if generation != self._generation:
                return None
            log.warning("Loading contacts for list %s failed: %s", list_id, exc)
            self._notices.report(NoticeScope.RECIPIENT_TABLE, f"Failed to load contacts: {exc}")
            return None

        if generation != self._generation:
            log.info("Discarding stale contacts for list %s", list_id)
            return None

        for recipient in recipients:
            recipient.selected = False
        self._recipients = recipients
        return list(recipients)

    # -- mutations ----------------------------------------------------------

    def toggle(self, recipient_id: RecipientId) -> bool:
        """Flip one recipient's membership and return whether it is now selected."""

        self._require_known([recipient_id])
        if recipient_id in self._selected:
            self._selected.remove(recipient_id)
        else:
            self._selected.add(recipient_id)
        self._refresh_select_all()
        self._persist()
        return recipient_id in self._selected

    def toggle_all(self, visible_ids: Iterable[RecipientId]) -> None:
        visible = list(visible_ids)
        self._require_known(visible)
        if any(recipient_id not in self._selected for recipient_id in visible):
            self._selected.update(visible)
            self.select_all = True
        else:
            self._selected.clear()
            self.select_all = False
        self._persist()

    def set_desired_count(self, count: int) -> None:
        if count < 0:
            return
        self.desired_count = count

    # -- internals ----------------------------------------------------------

    async def _restore_cached_list(self, snapshot: SelectionSnapshot, list_id: ListId) -> None:
        self._generation += 1
        generation = self._generation
        self.active_list_id = list_id

        try:
            recipients = await self._registry.load_contacts(list_id)
        except RemoteServiceError as exc:
            if generation != self._generation:
                return
            log.warning("Restoring cached selection for list %s failed: %s", list_id, exc)
            self._notices.report(
                NoticeScope.RECIPIENT_TABLE, f"Failed to load saved selections: {exc}"
            )
            self._recipients = []
            self._selected.clear()
            self.select_all = False
            self._persist()
            return

        if generation != self._generation:
            log.info("Discarding stale cached restore for list %s", list_id)
            return

        self._recipients = recipients
        loaded_ids = {recipient.id for recipient in recipients}
        dropped = snapshot.selected_ids - loaded_ids
        if dropped:
            log.info("Dropping %s cached selections no longer in list %s", len(dropped), list_id)
        self._selected = set(snapshot.selected_ids & loaded_ids)
        self._refresh_select_all()
        self._persist(saved_at=snapshot.saved_at)

    async def _overlay_remote(self, snapshot: SelectionSnapshot | None) -> None:
        campaign_id = self._require_campaign()
        generation = self._generation
        try:
            campaign = await self._campaigns.fetch_campaign(campaign_id)
        except RemoteServiceError as exc:
            log.warning("Reading campaign %s failed: %s", campaign_id, exc)
            self._notices.report(
                NoticeScope.RECIPIENT_TABLE, f"Failed to load saved selections: {exc}"
            )
            return

        self.campaign = campaign
        if self.mode is not campaign.mode:
            self.mode = campaign.mode
            self._persist(saved_at=snapshot.saved_at if snapshot is not None else None)
        if campaign.total_recipients:
            self.desired_count = campaign.total_recipients

        if campaign.total_recipients <= 0 or not self._recipients:
            return
        if not self._remote_wins(snapshot, campaign):
            log.info("Keeping cached selection; it is newer than campaign %s", campaign_id)
            return

        try:
            committed = await self._campaigns.fetch_committed_recipients(campaign_id)
        except RemoteServiceError as exc:
            log.warning("Reading committed recipients for %s failed: %s", campaign_id, exc)
            self._notices.report(
                NoticeScope.RECIPIENT_TABLE, f"Failed to load saved selections: {exc}"
            )
            return

        if generation != self._generation:
            log.info("Discarding committed recipients; list changed while loading")
            return

        resolved = self._resolve_committed(committed)
        if not resolved:
            return
        self._selected = resolved
        self._refresh_select_all()
        self._persist()

    def _remote_wins(self, snapshot: SelectionSnapshot | None, campaign: CampaignSnapshot) -> bool:
        if self._precedence is RemotePrecedence.ALWAYS or snapshot is None:
            return True
        if campaign.updated_at is None:
            return True
        return campaign.updated_at > snapshot.saved_at

    def _resolve_committed(self, committed: Sequence[CommittedRecipient]) -> set[RecipientId]:
        loaded_ids = {recipient.id for recipient in self._recipients}
        by_email = {
            recipient.email.lower(): recipient.id
            for recipient in self._recipients
            if recipient.email
        }
        resolved: set[RecipientId] = set()
        for entry in committed:
            if entry.contact_id is not None and entry.contact_id in loaded_ids:
                resolved.add(entry.contact_id)
            elif entry.record_id is not None and entry.record_id in loaded_ids:
                resolved.add(entry.record_id)
            elif entry.email and entry.email.lower() in by_email:
                resolved.add(by_email[entry.email.lower()])
            else:
                log.info("Committed recipient %s is not in the active list", entry.name or entry)
        return resolved

    def _refresh_select_all(self) -> None:
        self.select_all = bool(self._recipients) and len(self._selected) == len(self._recipients)

    def _require_known(self, recipient_ids: Iterable[RecipientId]) -> None:
        loaded_ids = {recipient.id for recipient in self._recipients}
        unknown = [recipient_id for recipient_id in recipient_ids if recipient_id not in loaded_ids]
        if unknown:
            raise UnknownRecipientError(f"Unknown recipient(s): {', '.join(sorted(unknown))}")

    def _require_campaign(self) -> str:
        if self.campaign_id is None:
            raise RuntimeError("Selection manager not initialised; call initialize() first")
        return self.campaign_id

    def _persist(self, *, saved_at: datetime | None = None) -> None:
        for recipient in self._recipients:
            recipient.selected = recipient.id in self._selected
        self._cache.save(
            SelectionSnapshot(
                campaign_id=self._require_campaign(),
                active_list_id=self.active_list_id,
                selected_ids=frozenset(self._selected),
                mode=self.mode,
                saved_at=saved_at or datetime.now(UTC),
            )
        )
