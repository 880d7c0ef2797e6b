"""Campaign budget value object."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


def money_to_json(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True, slots=True)
class Budget:
    total_budget: Decimal
    max_per_gift: Decimal
    currency: str = "USD"
    spent: Decimal = Decimal(0)

    def to_payload(self) -> dict[str, object]:
        return {
            "totalBudget": money_to_json(self.total_budget),
            "maxPerGift": money_to_json(self.max_per_gift),
            "currency": self.currency,
            "spent": money_to_json(self.spent),
        }
