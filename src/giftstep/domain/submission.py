"""Validate and commit the recipient step to the remote campaign record."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from logging import getLogger
from typing import TYPE_CHECKING, Final

from giftstep.domain.budget import DEFAULT_CURRENCY, compute_budget
from giftstep.domain.errors import RemoteServiceError
from giftstep.domain.model import CampaignMode, NoticeScope, money_to_json

if TYPE_CHECKING:
    from collections.abc import Sequence

    from giftstep.domain.model import Budget, CampaignSnapshot, Recipient
    from giftstep.domain.notices import Notices
    from giftstep.domain.ports.campaign import CampaignGateway

log = getLogger(__name__)

RECIPIENTS_FIELD: Final[str] = "recipients"
RECIPIENT_COUNT_FIELD: Final[str] = "recipientCount"

NO_RECIPIENTS_MESSAGE: Final[str] = "Please select at least one contact to continue"
NO_COUNT_MESSAGE: Final[str] = "Recipient count must be greater than 0"


class _StepFailedError(Exception):
    def __init__(self, message: str, *, partial_commit: bool = False) -> None:
        super().__init__(message)
        self.partial_commit = partial_commit


@dataclass(slots=True)
class CommitResult:
    """Outcome of a submission; ``ok`` results are handed to the next step."""

    ok: bool
    recipients: list[Recipient] = field(default_factory=list["Recipient"])
    budget: Budget | None = None
    total_recipients: int = 0
    boost_registration: dict[str, object] | None = None
    field_errors: dict[str, str] = field(default_factory=dict[str, str])
    error: str | None = None
    partial_commit: bool = False


def validate_submission(
    selection: Sequence[Recipient],
    mode: CampaignMode,
    desired_count: int,
) -> dict[str, str]:
    errors: dict[str, str] = {}
    if mode is CampaignMode.TARGET_COUNT:
        if desired_count <= 0:
            errors[RECIPIENT_COUNT_FIELD] = NO_COUNT_MESSAGE
    elif not selection:
        errors[RECIPIENTS_FIELD] = NO_RECIPIENTS_MESSAGE
    return errors


class SubmissionCoordinator:
    """Persist budget and recipients for one campaign, then hand over."""

    def __init__(
        self,
        *,
        campaign_id: str,
        campaigns: CampaignGateway,
        notices: Notices,
        unit_cost: Decimal = Decimal(25),
        currency: str = DEFAULT_CURRENCY,
    ) -> None:
        self._campaign_id = campaign_id
        self._campaigns = campaigns
        self._notices = notices
        self._unit_cost = unit_cost
        self._currency = currency

    async def submit(
        self,
        selection: Sequence[Recipient],
        mode: CampaignMode,
        desired_count: int,
    ) -> CommitResult:
        field_errors = validate_submission(selection, mode, desired_count)
        if field_errors:
            log.info("Submission rejected: %s", field_errors)
            return CommitResult(ok=False, field_errors=field_errors)

        selected = list(selection)
        budget = compute_budget(mode, self._unit_cost, len(selected), currency=self._currency)
        total_recipients = desired_count if mode is CampaignMode.TARGET_COUNT else len(selected)

        try:
            campaign = await self._read_campaign()
            payload = self._update_payload(campaign, budget, total_recipients)
            await self._write_campaign(payload)
            if mode is CampaignMode.STANDARD:
                await self._commit_recipients(campaign, selected)
        except _StepFailedError as exc:
            message = f"Failed to save campaign data: {exc}"
            log.error(message)  # noqa: TRY400
            self._notices.report(NoticeScope.SUBMIT, message)
            return CommitResult(ok=False, error=message, partial_commit=exc.partial_commit)

        self._notices.clear()
        boost = payload.get("boostRegistration")
        log.info(
            "Committed campaign %s: mode=%s, total_recipients=%s, total_budget=%s",
            self._campaign_id,
            mode,
            total_recipients,
            budget.total_budget,
        )
        return CommitResult(
            ok=True,
            recipients=selected if mode is CampaignMode.STANDARD else [],
            budget=budget,
            total_recipients=total_recipients,
            boost_registration=boost if isinstance(boost, dict) else None,
        )

    def _update_payload(
        self,
        campaign: CampaignSnapshot,
        budget: Budget,
        total_recipients: int,
    ) -> dict[str, object]:
        payload: dict[str, object] = {
            "total_recipients": total_recipients,
            "budget": budget.to_payload(),
        }
        if campaign.is_boost_registration:
            payload["boostRegistration"] = {
                **(campaign.boost_registration or {}),
                "perGiftCost": money_to_json(self._unit_cost),
            }
        return payload

    async def _read_campaign(self) -> CampaignSnapshot:
        try:
            return await self._campaigns.fetch_campaign(self._campaign_id)
        except RemoteServiceError as exc:
            raise _StepFailedError(f"Failed to fetch current campaign: {exc}") from exc

    async def _write_campaign(self, payload: dict[str, object]) -> None:
        try:
            await self._campaigns.update_campaign(self._campaign_id, payload)
        except RemoteServiceError as exc:
            raise _StepFailedError(f"Failed to save budget: {exc}") from exc

    async def _commit_recipients(
        self,
        campaign: CampaignSnapshot,
        selected: Sequence[Recipient],
    ) -> None:
        contact_ids = [recipient.id for recipient in selected]
        try:
            await self._campaigns.commit_recipients(self._campaign_id, contact_ids)
        except RemoteServiceError as exc:
            reverted = await self._revert_campaign(campaign)
            if not reverted:
                raise _StepFailedError(
                    f"Failed to add recipients: {exc}; the budget was already updated and "
                    "could not be reverted, the campaign needs manual reconciliation",
                    partial_commit=True,
                ) from exc
            raise _StepFailedError(f"Failed to add recipients: {exc}") from exc

    async def _revert_campaign(self, campaign: CampaignSnapshot) -> bool:
        # absent earlier values are sent as null so the new ones do not linger
        payload: dict[str, object] = {
            "total_recipients": campaign.total_recipients,
            "budget": campaign.budget,
        }
        if campaign.is_boost_registration:
            payload["boostRegistration"] = campaign.boost_registration
        try:
            await self._campaigns.update_campaign(self._campaign_id, payload)
        except RemoteServiceError as exc:
            log.error("Reverting campaign %s failed: %s", self._campaign_id, exc)  # noqa: TRY400
            return False
        log.warning("Reverted campaign %s after failed recipient commit", self._campaign_id)
        return True
