from __future__ import annotations

import asyncio

from giftstep.domain.contact_lists import ContactListRegistry, filter_catalog, merge_lists
from giftstep.domain.errors import RemoteServiceError
from giftstep.domain.model import NoticeScope
from giftstep.domain.notices import Notices
from tests.helpers.recipients import FakeContactListSource, make_list, make_recipient


def test_merge_keeps_general_order_and_appends_scoped_only() -> None:
    general = [make_list("a"), make_list("b")]
    scoped = [make_list("c", context_id="evt"), make_list("b", context_id="evt")]

    merged = merge_lists(general, scoped)

    assert [item.id for item in merged] == ["a", "b", "c"]
    assert merged[1].context_id == "evt"
    assert merged[2].context_id == "evt"


def test_merge_keeps_general_fields_on_overlap() -> None:
    general = [make_list("a", name="General name", recipient_count=10)]
    scoped = [make_list("a", name="Scoped name", recipient_count=3, context_id="evt")]

    merged = merge_lists(general, scoped)

    assert merged[0].name == "General name"
    assert merged[0].recipient_count == 10
    assert merged[0].context_id == "evt"


def test_merge_is_idempotent() -> None:
    general = [make_list("a"), make_list("b")]
    scoped = [make_list("b", context_id="evt"), make_list("c", context_id="evt")]

    once = merge_lists(general, scoped)
    twice = merge_lists(once, scoped)

    assert twice == once


def test_merge_has_unique_ids() -> None:
    general = [make_list("a"), make_list("a")]
    scoped = [make_list("a", context_id="evt"), make_list("b", context_id="evt")]

    merged = merge_lists(general, scoped)

    assert [item.id for item in merged] == ["a", "b"]


def test_filter_catalog_by_search_and_tags() -> None:
    lists = [
        make_list("a", name="Berlin Summit", tags=("vip", "event")),
        make_list("b", name="Newsletter", description="Berlin readers", tags=("event",)),
        make_list("c", name="Partners"),
    ]

    assert [item.id for item in filter_catalog(lists, search="berlin")] == ["a", "b"]
    assert [item.id for item in filter_catalog(lists, tags=["VIP"])] == ["a"]
    assert [item.id for item in filter_catalog(lists, search="berlin", tags=["event"])] == [
        "a",
        "b",
    ]


def test_refresh_merges_general_and_scoped_lists() -> None:
    source = FakeContactListSource(
        general=[make_list("a")],
        scoped={"evt": [make_list("s")]},
    )
    registry = ContactListRegistry(source, notices=Notices())

    lists = asyncio.run(registry.refresh(context_id="evt"))

    assert [item.id for item in lists] == ["a", "s"]
    assert [item.id for item in registry.scoped_lists] == ["s"]
    assert registry.scoped_lists[0].context_id == "evt"


def test_refresh_failure_keeps_previous_catalog_and_reports() -> None:
    notices = Notices()
    source = FakeContactListSource(general=[make_list("a")])
    registry = ContactListRegistry(source, notices=notices)
    asyncio.run(registry.refresh())

    source.general_error = RemoteServiceError("Failed to fetch contact lists: 500")
    lists = asyncio.run(registry.refresh())

    assert [item.id for item in lists] == ["a"]
    assert notices.get(NoticeScope.LIST_SELECTOR) == "Failed to fetch contact lists: 500"


def test_refresh_retry_clears_notice() -> None:
    notices = Notices()
    source = FakeContactListSource(general=[make_list("a")])
    source.general_error = RemoteServiceError("boom")
    registry = ContactListRegistry(source, notices=notices)
    asyncio.run(registry.refresh())

    source.general_error = None
    asyncio.run(registry.refresh())

    assert notices.get(NoticeScope.LIST_SELECTOR) is None
    assert registry.get("a") is not None


def test_scoped_failure_is_only_logged() -> None:
    notices = Notices()
    source = FakeContactListSource(general=[make_list("a")])
    source.scoped_error = RemoteServiceError("boom")
    registry = ContactListRegistry(source, notices=notices)

    lists = asyncio.run(registry.refresh(context_id="evt"))

    assert [item.id for item in lists] == ["a"]
    assert not notices.has_messages


def test_load_contacts_drops_duplicate_ids() -> None:
    source = FakeContactListSource(
        contacts={"a": [make_recipient("1"), make_recipient("1"), make_recipient("2")]}
    )
    registry = ContactListRegistry(source, notices=Notices())

    recipients = asyncio.run(registry.load_contacts("a"))

    assert [recipient.id for recipient in recipients] == ["1", "2"]
