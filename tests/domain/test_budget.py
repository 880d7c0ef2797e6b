from __future__ import annotations

from decimal import Decimal

import pytest

from giftstep.domain.budget import compute_budget
from giftstep.domain.model import Budget, CampaignMode


def test_standard_budget_scales_with_selection() -> None:
    budget = compute_budget(CampaignMode.STANDARD, Decimal(25), 2)

    assert budget.total_budget == Decimal(50)
    assert budget.max_per_gift == Decimal(25)
    assert budget.currency == "USD"
    assert budget.spent == Decimal(0)


def test_target_count_budget_is_a_single_unit() -> None:
    budget = compute_budget(CampaignMode.TARGET_COUNT, Decimal(25), 40)

    assert budget.total_budget == Decimal(25)
    assert budget.max_per_gift == Decimal(25)


def test_empty_standard_selection_costs_nothing() -> None:
    budget = compute_budget("standard", 25, 0)

    assert budget.total_budget == Decimal(0)
    assert budget.max_per_gift == Decimal(25)


def test_identical_inputs_give_identical_budgets() -> None:
    first = compute_budget(CampaignMode.STANDARD, "12.50", 3)
    second = compute_budget(CampaignMode.STANDARD, Decimal("12.50"), 3)

    assert first == second
    assert first.to_payload() == second.to_payload()
    assert first.total_budget == Decimal("37.50")


def test_payload_renders_integral_amounts_as_ints() -> None:
    payload = compute_budget(CampaignMode.STANDARD, Decimal(25), 2).to_payload()

    assert payload == {"totalBudget": 50, "maxPerGift": 25, "currency": "USD", "spent": 0}
    assert isinstance(payload["totalBudget"], int)


def test_payload_keeps_fractional_amounts() -> None:
    payload = compute_budget(CampaignMode.STANDARD, Decimal("12.5"), 1).to_payload()

    assert payload["totalBudget"] == 12.5


def test_budget_is_frozen() -> None:
    budget = Budget(total_budget=Decimal(1), max_per_gift=Decimal(1))

    with pytest.raises(AttributeError):
        budget.total_budget = Decimal(2)  # type: ignore[misc]


@pytest.mark.parametrize(("unit_cost", "count"), [(Decimal(-1), 1), (Decimal(25), -1)])
def test_negative_inputs_are_rejected(unit_cost: Decimal, count: int) -> None:
    with pytest.raises(ValueError, match="non-negative"):
        compute_budget(CampaignMode.STANDARD, unit_cost, count)


def test_currency_is_passed_through() -> None:
    budget = compute_budget(CampaignMode.STANDARD, Decimal(10), 1, currency="EUR")

    assert budget.currency == "EUR"
