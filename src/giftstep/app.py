"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from logging import getLogger
from typing import TYPE_CHECKING

from giftstep.adapters.peopledata import PeopleDataLabsLookup
from giftstep.adapters.platform import PlatformClient
from giftstep.adapters.sqlalchemy.cache import SqlAlchemySelectionCache, is_started, startup
from giftstep.config.step import StepConfig, get_step_config
from giftstep.domain.budget import compute_budget
from giftstep.domain.contact_lists import ContactListRegistry
from giftstep.domain.enrichment import EnrichmentPipeline, EnrichmentSummary
from giftstep.domain.errors import NoEligibleRecipientsError
from giftstep.domain.model import RemotePrecedence
from giftstep.domain.notices import Notices
from giftstep.domain.selection import SelectionStateManager
from giftstep.domain.submission import CommitResult, SubmissionCoordinator

if TYPE_CHECKING:
    from giftstep.domain.model import Budget
    from giftstep.domain.ports.cache import SelectionCache
    from giftstep.domain.ports.campaign import CampaignGateway
    from giftstep.domain.ports.catalog import ContactListSource
    from giftstep.domain.ports.enrichment import EnrichmentLookup, EnrichmentStore
    from giftstep.domain.throttle import Delay

type LookupFactory = Callable[[], AbstractAsyncContextManager[EnrichmentLookup]]

log = getLogger(__name__)


class RecipientStep:
    """The recipient step of one campaign: catalog, selection, enrichment and submit."""

    def __init__(
        self,
        *,
        campaign_id: str,
        registry: ContactListRegistry,
        selection: SelectionStateManager,
        submission: SubmissionCoordinator,
        store: EnrichmentStore,
        lookup_factory: LookupFactory,
        notices: Notices,
        step_config: StepConfig,
        context_id: str | None = None,
        enrichment_delay: Delay | None = None,
    ) -> None:
        self.campaign_id = campaign_id
        self.context_id = context_id
        self.registry = registry
        self.selection = selection
        self.submission = submission
        self.notices = notices
        self.step_config = step_config
        self._store = store
        self._lookup_factory = lookup_factory
        self._enrichment_delay = enrichment_delay

    async def open(self) -> None:
        """Load the list catalog, then restore the selection."""

        await self.registry.refresh(context_id=self.context_id)
        await self.selection.initialize(self.campaign_id)
        log.info(
            "Opened recipient step for %s: list=%s, selected=%s, mode=%s",
            self.campaign_id,
            self.selection.active_list_id,
            len(self.selection.selected_ids),
            self.selection.mode,
        )

    def budget(self) -> Budget:
        return compute_budget(
            self.selection.mode,
            self.step_config.unit_cost,
            len(self.selection.selected_ids),
            currency=self.step_config.currency,
        )

    async def enrich_selected(self) -> EnrichmentSummary:
        list_id = self.selection.active_list_id
        if list_id is None:
            raise NoEligibleRecipientsError("Select a contact list before enriching")

        async with self._lookup_factory() as lookup:
            pipeline = EnrichmentPipeline(
                lookup=lookup,
                store=self._store,
                delay=self._enrichment_delay,
            )
            return await pipeline.enrich(self.selection.selected_recipients, list_id=list_id)

    async def submit(self) -> CommitResult:
        return await self.submission.submit(
            self.selection.selected_recipients,
            self.selection.mode,
            self.selection.desired_count,
        )


def _default_lookup_factory() -> AbstractAsyncContextManager[EnrichmentLookup]:
    return PeopleDataLabsLookup()


def build_recipient_step(
    campaign_id: str,
    *,
    context_id: str | None = None,
    source: ContactListSource | None = None,
    campaigns: CampaignGateway | None = None,
    store: EnrichmentStore | None = None,
    cache: SelectionCache | None = None,
    lookup_factory: LookupFactory | None = None,
    step_config: StepConfig | None = None,
    precedence: RemotePrecedence = RemotePrecedence.ALWAYS,
    enrichment_delay: Delay | None = None,
) -> RecipientStep:
    """Wire the recipient step with the platform, enrichment and cache adapters.

    Collaborators that are not given are built from the environment.
    """

    config = step_config or get_step_config()
    if source is None or campaigns is None or store is None:
        platform = PlatformClient()
        source = source or platform
        campaigns = campaigns or platform
        store = store or platform

    if cache is None:
        if not is_started():
            startup()
        cache = SqlAlchemySelectionCache()

    notices = Notices()
    registry = ContactListRegistry(source, notices=notices)
    selection = SelectionStateManager(
        registry=registry,
        cache=cache,
        campaigns=campaigns,
        notices=notices,
        precedence=precedence,
        default_desired_count=config.default_desired_count,
    )
    submission = SubmissionCoordinator(
        campaign_id=campaign_id,
        campaigns=campaigns,
        notices=notices,
        unit_cost=config.unit_cost,
        currency=config.currency,
    )
    return RecipientStep(
        campaign_id=campaign_id,
        registry=registry,
        selection=selection,
        submission=submission,
        store=store,
        lookup_factory=lookup_factory or _default_lookup_factory,
        notices=notices,
        step_config=config,
        context_id=context_id,
        enrichment_delay=enrichment_delay,
    )
