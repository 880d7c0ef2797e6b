"""Budget derivation for the recipient step."""

from __future__ import annotations

from decimal import Decimal

from giftstep.domain.model import Budget, CampaignMode

DEFAULT_CURRENCY = "USD"


def compute_budget(
    mode: CampaignMode | str,
    unit_cost: Decimal | int | str,
    selected_count: int,
    *,
    currency: str = DEFAULT_CURRENCY,
) -> Budget:
    """Derive the campaign budget from the unit cost and the selection size.

    In standard mode every selected recipient costs ``unit_cost``. In
    target-count mode recipients are resolved later from a headcount, so the
    selection size is ignored and the budget is a single unit.
    """

    resolved_mode = CampaignMode(mode)
    cost = Decimal(str(unit_cost)) if not isinstance(unit_cost, Decimal) else unit_cost
    if cost < 0:
        raise ValueError(f"unit cost must be non-negative, got {unit_cost}")
    if selected_count < 0:
        raise ValueError(f"selected count must be non-negative, got {selected_count}")

    if resolved_mode is CampaignMode.TARGET_COUNT:
        return Budget(total_budget=cost, max_per_gift=cost, currency=currency)
    return Budget(total_budget=cost * selected_count, max_per_gift=cost, currency=currency)
