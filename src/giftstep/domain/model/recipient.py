"""Recipients and contact lists."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime  # noqa: TC003

type RecipientId = str
type ListId = str


@dataclass(slots=True)
class Address:
    line1: str = ""
    line2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""
    is_verified: bool = False
    confidence_score: float | None = None

    def copy(self) -> Address:
        return replace(self)


@dataclass(slots=True, eq=True, kw_only=True)
class Recipient:
    """One prospective gift recipient loaded from a contact list.

    ``selected`` mirrors the selection state for display only; the selection
    manager's id set is what gets persisted.
    """

    id: RecipientId
    name: str
    email: str = ""
    company: str = ""
    title: str = ""
    linkedin_handle: str | None = None
    address: Address = field(default_factory=Address)
    selected: bool = field(default=False, compare=False)

    def copy(self) -> Recipient:
        return replace(self, address=self.address.copy())

    def overwrite_from(self, other: Recipient) -> None:
        """Take over every persisted field of ``other`` in place."""

        if other.id != self.id:
            raise ValueError(f"cannot overwrite recipient {self.id} from {other.id}")
        self.name = other.name
        self.email = other.email
        self.company = other.company
        self.title = other.title
        self.linkedin_handle = other.linkedin_handle
        self.address = other.address.copy()


@dataclass(slots=True, frozen=True, kw_only=True)
class ContactList:
    """A named collection of contacts available to a campaign.

    ``context_id`` is set for lists scoped to a hosting event.
    """

    id: ListId
    name: str
    description: str = ""
    recipient_count: int = 0
    tags: tuple[str, ...] = ()
    created_at: datetime | None = None
    status: str = "active"
    context_id: str | None = None

    @property
    def is_scoped(self) -> bool:
        return self.context_id is not None
