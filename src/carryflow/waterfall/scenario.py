# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Waterfall scenario: the aggregate root evaluated by the orchestrator.

A scenario bundles one exit value with the tier structure, investor classes
and optional carry term, model choice and provisions. Scenarios are immutable;
use `WaterfallScenario.with_exit_value` to derive a copy for a different exit.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, PositiveFloat, model_validator

from ..core.primitives import (
    InvestorKindEnum,
    Model,
    MoneyAmount,
    Percentage,
    Rate,
    WaterfallModelEnum,
)
from .entities import InvestorClass
from .tiers import CarriedInterestTerm, TierDefinition


class BlendWeights(Model):
    """Weights of the european and american results in a blended waterfall."""

    european_weight: Percentage = Decimal(50)
    american_weight: Percentage = Decimal(50)

    @model_validator(mode="after")
    def validate_total(self) -> "BlendWeights":
        if self.european_weight + self.american_weight <= 0:
            raise ValueError("Blend weights cannot both be zero")
        return self

    @property
    def normalized(self) -> tuple[Decimal, Decimal]:
        """(european, american) weights scaled to sum to 1."""
        total = self.european_weight + self.american_weight
        return self.european_weight / total, self.american_weight / total


class ClawbackProvision(Model):
    """
    GP clawback tested against a simple-interest LP hurdle.

    The LPs are owed ``invested * (1 + hurdle_rate% * distribution_life_years)``;
    ``clawback_rate`` percent of any shortfall is recaptured from carry.
    """

    hurdle_rate: Rate = Field(default=Decimal(8), description="Annual hurdle, percent")
    clawback_rate: Percentage = Field(
        default=Decimal(100), description="Percent of the shortfall recaptured"
    )
    distribution_life_years: PositiveFloat = Field(
        ..., description="Years over which the hurdle accrues"
    )


class LookbackProvision(Model):
    """Carry held back pending a lookback on prior losses."""

    lookback_years: PositiveFloat = Field(..., description="Length of the lookback window")
    loss_carry_forward: MoneyAmount = Field(
        default=Decimal(0), description="Prior losses still to be recovered"
    )
    carry_at_risk_rate: Percentage = Field(
        default=Decimal(0), description="Percent of carry held back while losses remain"
    )


class WaterfallScenario(Model):
    """
    One exit value run through one tier structure.

    Example:
        ```python
        scenario = WaterfallScenario(
            id="base",
            name="Base Case",
            exit_value=100_000_000,
            tiers=create_standard_waterfall(40_000_000, 10, 3),
            investor_classes=[
                InvestorClass(id="lp", name="LPs", kind="LP", commitment=40_000_000),
                InvestorClass(id="gp", name="GP", kind="GP"),
            ],
        )
        ```
    """

    id: str = Field(..., min_length=1)
    name: str
    exit_value: MoneyAmount = Field(..., description="Total proceeds to distribute")
    management_fees: MoneyAmount = Field(
        default=Decimal(0),
        description="Fees paid to the GP outside the waterfall; reported, never allocated",
    )
    tiers: List[TierDefinition] = Field(..., min_length=1)
    investor_classes: List[InvestorClass] = Field(default_factory=list)
    model: WaterfallModelEnum = WaterfallModelEnum.EUROPEAN
    blend: Optional[BlendWeights] = None
    carry_term: Optional[CarriedInterestTerm] = None
    investment_date: Optional[datetime.date] = None
    exit_date: Optional[datetime.date] = None
    clawback: Optional[ClawbackProvision] = None
    lookback: Optional[LookbackProvision] = None

    @property
    def lp_classes(self) -> List[InvestorClass]:
        return [ic for ic in self.investor_classes if ic.kind is InvestorKindEnum.LP]

    @property
    def gp_classes(self) -> List[InvestorClass]:
        return [ic for ic in self.investor_classes if ic.kind is InvestorKindEnum.GP]

    @property
    def has_dates(self) -> bool:
        return self.investment_date is not None and self.exit_date is not None

    def with_exit_value(self, exit_value: Decimal) -> "WaterfallScenario":
        """Return a validated copy of this scenario with a different exit value."""
        data = self.model_dump()
        data["exit_value"] = exit_value
        return WaterfallScenario.model_validate(data)


__all__ = [
    "BlendWeights",
    "ClawbackProvision",
    "LookbackProvision",
    "WaterfallScenario",
]
