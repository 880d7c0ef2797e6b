from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

from giftstep.adapters.memory import InMemorySelectionCache
from giftstep.app import RecipientStep, build_recipient_step
from giftstep.config.step import StepConfig
from giftstep.domain.errors import NoEligibleRecipientsError, RemoteServiceError
from giftstep.domain.model import CampaignMode, CampaignSnapshot, CommittedRecipient
from tests.helpers.recipients import (
    FakeCampaignGateway,
    FakeContactListSource,
    FakeEnrichmentLookup,
    FakeEnrichmentStore,
    RecordingDelay,
    make_list,
    make_recipient,
    success_record,
)


def _build(
    source: FakeContactListSource,
    campaigns: FakeCampaignGateway,
    cache: InMemorySelectionCache,
    *,
    lookup: FakeEnrichmentLookup | None = None,
    store: FakeEnrichmentStore | None = None,
    context_id: str | None = None,
) -> RecipientStep:
    fake_lookup = lookup or FakeEnrichmentLookup({})
    return build_recipient_step(
        "camp-1",
        context_id=context_id,
        source=source,
        campaigns=campaigns,
        store=store or FakeEnrichmentStore(),
        cache=cache,
        lookup_factory=lambda: fake_lookup,
        step_config=StepConfig(unit_cost=Decimal(25)),
        enrichment_delay=RecordingDelay(),
    )


def _source() -> FakeContactListSource:
    return FakeContactListSource(
        general=[make_list("L1")],
        contacts={
            "L1": [
                make_recipient("1", linkedin_handle="one"),
                make_recipient("2"),
                make_recipient("3", linkedin_handle="three"),
            ]
        },
    )


def test_full_step_flow(memory_cache: InMemorySelectionCache) -> None:
    events: list[str] = []
    campaigns = FakeCampaignGateway()
    lookup = FakeEnrichmentLookup(
        {"1": success_record("1", company="New Co"), "3": success_record("3", title="CTO")},
        events,
    )
    store = FakeEnrichmentStore(events)
    step = _build(_source(), campaigns, memory_cache, lookup=lookup, store=store)

    async def scenario() -> None:
        await step.open()
        await step.selection.select_list("L1")
        step.selection.toggle("1")
        step.selection.toggle("2")
        step.selection.toggle("3")

        summary = await step.enrich_selected()
        assert summary.success_count == 2
        assert summary.skipped_count == 1

        result = await step.submit()
        assert result.ok
        assert [recipient.id for recipient in result.recipients] == ["1", "2", "3"]
        assert result.recipients[0].company == "New Co"

    asyncio.run(scenario())

    assert events[-1] == "closed"
    assert step.budget().total_budget == Decimal(75)
    assert campaigns.commits == [["1", "2", "3"]]
    assert campaigns.updates[0]["total_recipients"] == 3
    assert not step.notices.has_messages


def test_open_restores_selection_from_cache(memory_cache: InMemorySelectionCache) -> None:
    source = _source()
    first = _build(source, FakeCampaignGateway(), memory_cache)

    async def select_two() -> None:
        await first.open()
        await first.selection.select_list("L1")
        first.selection.toggle("1")
        first.selection.toggle("3")

    asyncio.run(select_two())

    second = _build(source, FakeCampaignGateway(), memory_cache)
    asyncio.run(second.open())

    assert second.selection.active_list_id == "L1"
    assert second.selection.selected_ids == frozenset({"1", "3"})
    assert second.budget().total_budget == Decimal(50)


def test_open_overlays_committed_recipients(memory_cache: InMemorySelectionCache) -> None:
    source = FakeContactListSource(
        general=[make_list("L1")],
        scoped={"event-1": [make_list("S1")]},
        contacts={"S1": [make_recipient("1"), make_recipient("2")]},
    )
    campaigns = FakeCampaignGateway(
        CampaignSnapshot(campaign_id="camp-1", total_recipients=1),
        committed=[CommittedRecipient(contact_id="2")],
    )
    step = _build(source, campaigns, memory_cache, context_id="event-1")

    asyncio.run(step.open())

    assert step.selection.active_list_id == "S1"
    assert step.selection.selected_ids == frozenset({"2"})


def test_target_count_campaign_submits_headcount(memory_cache: InMemorySelectionCache) -> None:
    campaigns = FakeCampaignGateway(
        CampaignSnapshot(campaign_id="camp-1", motion="booth_giveaways", total_recipients=40)
    )
    step = _build(_source(), campaigns, memory_cache)

    async def scenario() -> None:
        await step.open()
        assert step.selection.mode is CampaignMode.TARGET_COUNT
        assert step.selection.desired_count == 40
        step.selection.set_desired_count(60)
        result = await step.submit()
        assert result.ok
        assert result.total_recipients == 60

    asyncio.run(scenario())

    assert campaigns.commits == []
    assert step.budget().total_budget == Decimal(25)


def test_enrich_requires_active_list(memory_cache: InMemorySelectionCache) -> None:
    step = _build(_source(), FakeCampaignGateway(), memory_cache)

    async def scenario() -> None:
        await step.open()
        await step.enrich_selected()

    with pytest.raises(NoEligibleRecipientsError):
        asyncio.run(scenario())


def test_open_reports_list_failure(memory_cache: InMemorySelectionCache) -> None:
    source = _source()
    source.general_error = RemoteServiceError("500 - boom")
    step = _build(source, FakeCampaignGateway(), memory_cache)

    asyncio.run(step.open())

    assert step.registry.lists == []
    assert "500 - boom" in next(iter(step.notices.as_dict().values()))
