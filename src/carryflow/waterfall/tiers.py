# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Waterfall Tier and Carried Interest Term Models

This module defines the building blocks of a distribution waterfall: the tier
variants that proceeds flow through, the carried-interest term that governs
GP economics, and the vesting schedules that decide how much accrued carry the
GP actually owns.

Key Features:
- Closed set of tier variants discriminated by ``tier_type``
- Absolute cumulative-proceeds bounds per tier (``tier_start`` / ``tier_end``)
- Industry-standard defaults (100/0 return of capital and preferred return,
  0/100 catch-up, 80/20 residual split)
- Immediate, cliff and graded vesting with acceleration triggers

Example:
    ```python
    tiers = [
        ReturnOfCapitalTier(name="Return of Capital", tier_end=40_000_000),
        PreferredReturnTier(name="Preferred Return", tier_end=52_000_000),
        CatchUpTier(name="GP Catch-Up", tier_end=55_000_000),
        ResidualSplitTier(name="Carried Interest"),
    ]
    term = CarriedInterestTerm(gp_carry_percentage=20, hurdle_rate=8)
    ```
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Annotated, Iterable, List, Literal, Optional, Union

from pydantic import Field, model_validator

from ..core.primitives import (
    AccelerationTriggerEnum,
    Model,
    MoneyAmount,
    Percentage,
    PositiveInt,
    PositiveIntGe1,
    Rate,
    TierTypeEnum,
)

# =============================================================================
# WATERFALL TIERS
# =============================================================================


class BaseTier(Model):
    """
    Common fields of every waterfall tier.

    Bounds are absolute cumulative proceeds: a tier bounded ``[40M, 52M]``
    receives whatever part of the proceeds falls between 40M and 52M.
    ``tier_start`` may be omitted, in which case it is the previous tier's end.
    The LP and GP shares are checked to sum to 100 when the tier list is
    resolved, against the configured ``percent_sum_tolerance``.
    """

    name: str = Field(..., description="Display name of the tier")
    lp_share_percent: Percentage = Field(..., description="LP share of this tier, 0-100")
    gp_share_percent: Percentage = Field(..., description="GP share of this tier, 0-100")
    tier_start: Optional[MoneyAmount] = Field(
        None, description="Cumulative proceeds at which this tier begins"
    )
    tier_end: Optional[MoneyAmount] = Field(
        None, description="Cumulative proceeds at which this tier is full; None = unbounded"
    )
    allocation_target: Optional[str] = Field(
        None, description="Investor class id receiving the LP side of this tier"
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "BaseTier":
        if (
            self.tier_start is not None
            and self.tier_end is not None
            and self.tier_end < self.tier_start
        ):
            raise ValueError(
                f"Tier '{self.name}' ends ({self.tier_end}) before it starts ({self.tier_start})"
            )
        return self

    @property
    def kind(self) -> TierTypeEnum:
        return TierTypeEnum(self.tier_type)

    @property
    def is_unbounded(self) -> bool:
        return self.tier_end is None


class ReturnOfCapitalTier(BaseTier):
    """Contributed capital returned to LPs before any profit is split."""

    tier_type: Literal["return_of_capital"] = "return_of_capital"
    lp_share_percent: Percentage = Decimal(100)
    gp_share_percent: Percentage = Decimal(0)


class PreferredReturnTier(BaseTier):
    """LP hurdle return on contributed capital."""

    tier_type: Literal["preferred_return"] = "preferred_return"
    lp_share_percent: Percentage = Decimal(100)
    gp_share_percent: Percentage = Decimal(0)


class CatchUpTier(BaseTier):
    """GP-heavy tier that lets the GP catch up to its carry share of profits."""

    tier_type: Literal["gp_catch_up"] = "gp_catch_up"
    lp_share_percent: Percentage = Decimal(0)
    gp_share_percent: Percentage = Decimal(100)


class ResidualSplitTier(BaseTier):
    """Everything above the earlier tiers, split at the carry ratio."""

    tier_type: Literal["residual_split"] = "residual_split"
    lp_share_percent: Percentage = Decimal(80)
    gp_share_percent: Percentage = Decimal(20)


TierDefinition = Annotated[
    Union[ReturnOfCapitalTier, PreferredReturnTier, CatchUpTier, ResidualSplitTier],
    Field(discriminator="tier_type"),
]

# =============================================================================
# VESTING SCHEDULES
# =============================================================================


class BaseVestingSchedule(Model):
    """
    Decides what fraction of accrued carry has vested.

    Any listed acceleration trigger that has occurred vests everything.
    """

    acceleration_triggers: List[AccelerationTriggerEnum] = Field(
        default_factory=list,
        description="Events that fully vest outstanding carry when they occur",
    )

    def vested_fraction(
        self,
        months_elapsed: int,
        events: Iterable[AccelerationTriggerEnum] = (),
    ) -> float:
        """Fraction of carry vested after ``months_elapsed`` whole months, in [0, 1]."""
        if any(AccelerationTriggerEnum(e) in self.acceleration_triggers for e in events):
            return 1.0
        return min(1.0, max(0.0, self._scheduled_fraction(max(0, months_elapsed))))

    def _scheduled_fraction(self, months_elapsed: int) -> float:
        raise NotImplementedError("Subclasses must implement _scheduled_fraction")


class ImmediateVesting(BaseVestingSchedule):
    """Carry vests as soon as it accrues."""

    kind: Literal["immediate"] = "immediate"

    def _scheduled_fraction(self, months_elapsed: int) -> float:
        return 1.0


class CliffVesting(BaseVestingSchedule):
    """Nothing vests until the cliff, then everything does."""

    kind: Literal["cliff"] = "cliff"
    cliff_months: PositiveInt = Field(..., description="Months until carry fully vests")

    def _scheduled_fraction(self, months_elapsed: int) -> float:
        return 1.0 if months_elapsed >= self.cliff_months else 0.0


class GradedVesting(BaseVestingSchedule):
    """
    Linear vesting over ``vesting_period_months`` with an optional cliff.

    Before the cliff nothing is vested; from the cliff onwards the vested
    fraction is ``months_elapsed / vesting_period_months``, capped at 1.
    """

    kind: Literal["graded"] = "graded"
    vesting_period_months: PositiveIntGe1
    cliff_months: PositiveInt = 0

    @model_validator(mode="after")
    def validate_cliff(self) -> "GradedVesting":
        if self.cliff_months > self.vesting_period_months:
            raise ValueError("cliff_months cannot exceed vesting_period_months")
        return self

    def _scheduled_fraction(self, months_elapsed: int) -> float:
        if months_elapsed < self.cliff_months:
            return 0.0
        return months_elapsed / self.vesting_period_months


VestingSchedule = Annotated[
    Union[ImmediateVesting, CliffVesting, GradedVesting],
    Field(discriminator="kind"),
]

# =============================================================================
# CARRIED INTEREST TERM
# =============================================================================


class CarriedInterestTerm(Model):
    """
    GP economics applied when accruing carry.

    ``hurdle_rate`` is the annual rate the LP preferred return compounds at.
    ``preferred_return`` is the LP share of the preferred-return tier (100
    means the LPs receive the whole hurdle amount before the catch-up).

    Example:
        ```python
        term = CarriedInterestTerm(
            gp_carry_percentage=20,
            hurdle_rate=8,
            catchup_percentage=100,
            vesting_schedule=GradedVesting(vesting_period_months=48, cliff_months=12),
            effective_date=date(2021, 1, 1),
        )
        ```
    """

    gp_carry_percentage: Percentage = Field(
        default=Decimal(20), lt=100, description="GP share of profits above the hurdle"
    )
    hurdle_rate: Rate = Field(default=Decimal(8), description="Annual hurdle rate, percent")
    preferred_return: Percentage = Field(
        default=Decimal(100), description="LP share of the preferred-return tier"
    )
    catchup_percentage: Percentage = Field(
        default=Decimal(100), description="GP share of the catch-up tier"
    )
    catchup_cap: Optional[MoneyAmount] = Field(
        None, description="Maximum size of the catch-up tier"
    )
    compounding: bool = Field(
        default=True, description="Compound the hurdle annually; simple interest otherwise"
    )
    vesting_schedule: VestingSchedule = Field(default_factory=ImmediateVesting)
    effective_date: Optional[datetime.date] = Field(
        None, description="Vesting clock start; defaults to the first contribution"
    )


__all__ = [
    "BaseTier",
    "ReturnOfCapitalTier",
    "PreferredReturnTier",
    "CatchUpTier",
    "ResidualSplitTier",
    "TierDefinition",
    "BaseVestingSchedule",
    "ImmediateVesting",
    "CliffVesting",
    "GradedVesting",
    "VestingSchedule",
    "CarriedInterestTerm",
]
