"""Contact list catalog: general and event-scoped lists merged into one view."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from giftstep.domain.errors import RemoteServiceError
from giftstep.domain.model import NoticeScope

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from giftstep.domain.model import ContactList, ListId, Recipient
    from giftstep.domain.notices import Notices
    from giftstep.domain.ports.catalog import ContactListSource

log = getLogger(__name__)


def merge_lists(
    general: Sequence[ContactList],
    scoped: Sequence[ContactList],
) -> list[ContactList]:
    """Union two catalogs by id.

    General entries keep their order and fields; an entry that is also scoped
    takes the scoped context label. Scoped-only lists are appended last.
    """

    scoped_by_id = {contact_list.id: contact_list for contact_list in scoped}
    merged: list[ContactList] = []
    seen: set[ListId] = set()

    for contact_list in general:
        if contact_list.id in seen:
            continue
        seen.add(contact_list.id)
        scoped_entry = scoped_by_id.get(contact_list.id)
        if scoped_entry is not None and scoped_entry.context_id is not None:
            merged.append(replace(contact_list, context_id=scoped_entry.context_id))
        else:
            merged.append(contact_list)

    for contact_list in scoped:
        if contact_list.id in seen:
            continue
        seen.add(contact_list.id)
        merged.append(contact_list)

    return merged


def filter_catalog(
    lists: Iterable[ContactList],
    *,
    search: str = "",
    tags: Iterable[str] = (),
) -> list[ContactList]:
    needle = search.strip().lower()
    required = {tag.lower() for tag in tags if tag}
    matches: list[ContactList] = []
    for contact_list in lists:
        if needle and needle not in contact_list.name.lower() and (
            needle not in contact_list.description.lower()
        ):
            continue
        if required and not required.issubset({tag.lower() for tag in contact_list.tags}):
            continue
        matches.append(contact_list)
    return matches


class ContactListRegistry:
    """Fetches, merges and exposes the contact lists available to a campaign."""

    def __init__(self, source: ContactListSource, *, notices: Notices) -> None:
        self._source = source
        self._notices = notices
        self._catalog: list[ContactList] = []

    @property
    def lists(self) -> list[ContactList]:
        return list(self._catalog)

    @property
    def scoped_lists(self) -> list[ContactList]:
        return [contact_list for contact_list in self._catalog if contact_list.is_scoped]

    def get(self, list_id: ListId) -> ContactList | None:
        return next((item for item in self._catalog if item.id == list_id), None)

    async def fetch_general_lists(self) -> list[ContactList]:
        return await self._source.fetch_general_lists()

    async def fetch_scoped_lists(self, context_id: str) -> list[ContactList]:
        lists = await self._source.fetch_scoped_lists(context_id)
        return [
            item if item.context_id == context_id else replace(item, context_id=context_id)
            for item in lists
        ]

    async def refresh(self, *, context_id: str | None = None) -> list[ContactList]:
        """Rebuild the catalog; on failure keep the previous one and report it."""

        self._notices.dismiss(NoticeScope.LIST_SELECTOR)
        try:
            general = await self.fetch_general_lists()
        except RemoteServiceError as exc:
            log.warning("Fetching contact lists failed: %s", exc)
            self._notices.report(NoticeScope.LIST_SELECTOR, str(exc))
            return self.lists

        scoped: list[ContactList] = []
        if context_id is not None:
            try:
                scoped = await self.fetch_scoped_lists(context_id)
            except RemoteServiceError as exc:
                log.warning("Fetching contact lists for context %s failed: %s", context_id, exc)

        self._catalog = merge_lists(general, scoped)
        log.info(
            "Contact list catalog refreshed: general=%s, scoped=%s, merged=%s",
            len(general),
            len(scoped),
            len(self._catalog),
        )
        return self.lists

    def catalog(self, *, search: str = "", tags: Iterable[str] = ()) -> list[ContactList]:
        return filter_catalog(self._catalog, search=search, tags=tags)

    async def load_contacts(self, list_id: ListId) -> list[Recipient]:
        recipients = await self._source.fetch_contacts(list_id)
        seen: set[str] = set()
        unique: list[Recipient] = []
        for recipient in recipients:
            if recipient.id in seen:
                log.warning("Dropping duplicate contact %s in list %s", recipient.id, list_id)
                continue
            seen.add(recipient.id)
            unique.append(recipient)
        return unique
