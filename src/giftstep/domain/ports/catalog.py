"""Ports for reading contact lists and their contacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from giftstep.domain.model import ContactList, ListId, Recipient


@runtime_checkable
class ContactListSource(Protocol):
    """Remote catalog of contact lists for one organisation."""

    async def fetch_general_lists(self) -> list[ContactList]: ...

    async def fetch_scoped_lists(self, context_id: str) -> list[ContactList]: ...

    async def fetch_contacts(self, list_id: ListId) -> list[Recipient]: ...


__all__ = ["ContactListSource"]
