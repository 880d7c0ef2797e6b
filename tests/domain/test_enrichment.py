from __future__ import annotations

import asyncio

import pytest

from giftstep.domain.enrichment import EnrichmentPipeline, merge_enrichment
from giftstep.domain.errors import NoEligibleRecipientsError, RemoteServiceError
from giftstep.domain.ports.enrichment import EnrichmentRecord
from tests.helpers.recipients import (
    FakeEnrichmentLookup,
    FakeEnrichmentStore,
    RecordingDelay,
    make_recipient,
    success_record,
)


def test_batch_with_one_failed_lookup() -> None:
    events: list[str] = []
    recipients = [
        make_recipient("1", linkedin_handle="one"),
        make_recipient("2", linkedin_handle="two", company="Old Co", title="Old Title"),
        make_recipient("3", linkedin_handle="three"),
    ]
    before = recipients[1].copy()
    lookup = FakeEnrichmentLookup(
        {
            "1": success_record("1", company="New Co", city="Paris"),
            "2": RemoteServiceError("PDL API error: 500"),
            "3": success_record("3", title="CTO"),
        },
        events,
    )
    store = FakeEnrichmentStore(events)
    delay = RecordingDelay(events)
    pipeline = EnrichmentPipeline(lookup=lookup, store=store, delay=delay)

    summary = asyncio.run(pipeline.enrich(recipients, list_id="L1"))

    assert summary.success_count == 2
    assert summary.failure_count == 1
    assert summary.skipped_count == 0
    assert recipients[1] == before
    assert recipients[0].company == "New Co"
    assert recipients[0].address.city == "Paris"
    assert recipients[2].title == "CTO"
    assert events == [
        "lookup:1",
        "save:1",
        "delay",
        "lookup:2",
        "delay",
        "lookup:3",
        "save:3",
    ]
    assert [saved[:2] for saved in store.saved] == [("L1", "1"), ("L1", "3")]


def test_recipients_without_handle_are_skipped() -> None:
    recipients = [make_recipient("1", linkedin_handle="one"), make_recipient("2")]
    lookup = FakeEnrichmentLookup({"1": success_record("1", company="New Co")})
    pipeline = EnrichmentPipeline(
        lookup=lookup, store=FakeEnrichmentStore(), delay=RecordingDelay()
    )

    summary = asyncio.run(pipeline.enrich(recipients, list_id="L1"))

    assert summary.success_count == 1
    assert summary.skipped_count == 1
    assert lookup.events == ["lookup:1"]


def test_no_eligible_recipients_raises() -> None:
    pipeline = EnrichmentPipeline(
        lookup=FakeEnrichmentLookup({}), store=FakeEnrichmentStore(), delay=RecordingDelay()
    )

    with pytest.raises(NoEligibleRecipientsError):
        asyncio.run(pipeline.enrich([make_recipient("1")], list_id="L1"))


def test_failed_save_leaves_recipient_unchanged() -> None:
    recipient = make_recipient("1", linkedin_handle="one", company="Old Co")
    store = FakeEnrichmentStore()
    store.errors["1"] = RemoteServiceError("500")
    pipeline = EnrichmentPipeline(
        lookup=FakeEnrichmentLookup({"1": success_record("1", company="New Co")}),
        store=store,
        delay=RecordingDelay(),
    )

    summary = asyncio.run(pipeline.enrich([recipient], list_id="L1"))

    assert summary.failure_count == 1
    assert summary.records[0].error == "Failed to save enrichment data: 500"
    assert recipient.company == "Old Co"


def test_failed_lookup_record_is_counted_as_failure() -> None:
    recipient = make_recipient("1", linkedin_handle="one")
    lookup = FakeEnrichmentLookup({"1": EnrichmentRecord.failed("1", "no match")})
    store = FakeEnrichmentStore()
    pipeline = EnrichmentPipeline(lookup=lookup, store=store, delay=RecordingDelay())

    summary = asyncio.run(pipeline.enrich([recipient], list_id="L1"))

    assert summary.failure_count == 1
    assert store.saved == []


def test_merge_ignores_failed_record() -> None:
    recipient = make_recipient("1", company="Old Co")

    merged = merge_enrichment(recipient, EnrichmentRecord.failed("1", "boom"))

    assert merged == recipient
    assert merged is not recipient


@pytest.mark.parametrize("value", [None, "", "   ", 42, True, ["x"]])
def test_merge_keeps_existing_values_for_unusable_fields(value: object) -> None:
    recipient = make_recipient("1", company="Old Co", title="Old Title", city="Berlin")
    record = success_record("1", company=value, title=value, city=value, state=value, country=value)

    merged = merge_enrichment(recipient, record)

    assert merged.company == "Old Co"
    assert merged.title == "Old Title"
    assert merged.address.city == "Berlin"
    assert merged.address.country == "Germany"


def test_merge_only_touches_enrichable_fields() -> None:
    recipient = make_recipient("1", email="ada@example.com", linkedin_handle="ada")
    record = success_record(
        "1", company="New Co", title="CTO", city="Paris", state="IDF", country="France"
    )

    merged = merge_enrichment(recipient, record)

    assert (merged.company, merged.title) == ("New Co", "CTO")
    assert (merged.address.city, merged.address.state, merged.address.country) == (
        "Paris",
        "IDF",
        "France",
    )
    assert merged.address.line1 == recipient.address.line1
    assert merged.email == "ada@example.com"
    assert merged.linkedin_handle == "ada"
    assert recipient.company == "Acme"


def test_merge_is_additive() -> None:
    recipient = make_recipient("1")
    first = merge_enrichment(recipient, success_record("1", company="New Co"))
    second = merge_enrichment(first, success_record("1", title="CTO"))

    assert second.company == "New Co"
    assert second.title == "CTO"


def test_record_requires_consistent_error() -> None:
    with pytest.raises(ValueError, match="requires an error"):
        EnrichmentRecord(recipient_id="1", success=False)
    with pytest.raises(ValueError, match="cannot carry an error"):
        EnrichmentRecord(recipient_id="1", success=True, error="boom")
