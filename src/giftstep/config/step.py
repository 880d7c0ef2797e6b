"""Defaults for the recipient step itself."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .env import optional_decimal, optional_int

DEFAULT_UNIT_COST = Decimal(25)
DEFAULT_CURRENCY = "USD"
DEFAULT_DESIRED_COUNT = 100


@dataclass(frozen=True, slots=True)
class StepConfig:
    unit_cost: Decimal = DEFAULT_UNIT_COST
    currency: str = DEFAULT_CURRENCY
    default_desired_count: int = DEFAULT_DESIRED_COUNT


def get_step_config() -> StepConfig:
    return StepConfig(
        unit_cost=optional_decimal("GIFTSTEP_UNIT_COST", DEFAULT_UNIT_COST),
        default_desired_count=optional_int("GIFTSTEP_DEFAULT_COUNT", DEFAULT_DESIRED_COUNT),
    )
