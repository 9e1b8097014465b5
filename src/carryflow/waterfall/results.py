# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Result models for waterfall evaluation.

Every result is a frozen, serializable record. Derived quantities
(net return, multiple, totals) are computed fields so they always agree with
the stored amounts and can never be supplied as input.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field, computed_field, model_validator

from ..core.primitives import (
    ClawbackStatusEnum,
    FloatBetween0And1,
    InvestorKindEnum,
    IRRUnavailableReason,
    LookbackStatusEnum,
    Model,
    MoneyAmount,
    Percentage,
    TierTypeEnum,
    WaterfallModelEnum,
)
from ..core.calculations import FinancialCalculations
from ..core.money import ZERO


class TierBreakdownResult(Model):
    """Amount allocated by one tier, split into LP and GP sides."""

    tier_name: str
    tier_type: TierTypeEnum
    tier_start: MoneyAmount
    tier_end: Optional[MoneyAmount] = None
    total_amount: MoneyAmount
    cumulative_amount: MoneyAmount
    lp_amount: MoneyAmount
    gp_amount: MoneyAmount
    proceeds: MoneyAmount = Field(..., description="Total proceeds run through the waterfall")

    @model_validator(mode="after")
    def validate_split(self) -> "TierBreakdownResult":
        if self.lp_amount + self.gp_amount != self.total_amount:
            raise ValueError(
                f"Tier '{self.tier_name}' split {self.lp_amount} + {self.gp_amount} "
                f"does not equal {self.total_amount}"
            )
        return self

    @computed_field
    @property
    def percentage_of_proceeds(self) -> float:
        """Share of total proceeds that landed in this tier, percent."""
        if self.proceeds <= 0:
            return 0.0
        return float(self.total_amount / self.proceeds * 100)


class InvestorClassResult(Model):
    """What one investor class put in and took out."""

    investor_class_id: str
    investor_class_name: str
    kind: InvestorKindEnum
    invested: MoneyAmount
    returned: MoneyAmount
    carry: MoneyAmount = ZERO
    irr: Optional[float] = None
    irr_unavailable_reason: Optional[IRRUnavailableReason] = None

    @computed_field
    @property
    def net_return(self) -> Decimal:
        return self.returned - self.invested

    @computed_field
    @property
    def multiple(self) -> float:
        return FinancialCalculations.calculate_multiple(self.returned, self.invested)


class LPAllocation(Model):
    """One limited partner's pro-rata slice of its investor class."""

    limited_partner_id: str
    name: str
    ownership_percentage: Percentage
    normalized_share: FloatBetween0And1
    commitment: MoneyAmount
    invested: MoneyAmount
    returned: MoneyAmount

    @computed_field
    @property
    def net_return(self) -> Decimal:
        return self.returned - self.invested

    @computed_field
    @property
    def multiple(self) -> float:
        return FinancialCalculations.calculate_multiple(self.returned, self.invested)


class FundMetrics(Model):
    """
    Fund-level performance metrics.

    ``irr`` is None when it cannot be computed; ``irr_unavailable_reason``
    then says why. Consumers should render it as "not computable", never zero.
    """

    irr: Optional[float] = None
    irr_unavailable_reason: Optional[IRRUnavailableReason] = None
    moic: float
    dpi: float
    tvpi: float
    rvpi: float
    total_contributions: MoneyAmount
    total_distributions: MoneyAmount
    current_nav: MoneyAmount


class CarryAccrual(Model):
    """Point-in-time carried interest position of the GP."""

    as_of_date: datetime.date
    total_contributions: MoneyAmount
    total_distributions: MoneyAmount
    unrealized_value: MoneyAmount
    lp_preferred_return: MoneyAmount
    lp_preferred_return_paid: MoneyAmount
    catchup_amount: MoneyAmount
    catchup_paid: MoneyAmount
    accrued_carry: MoneyAmount
    vested_fraction: FloatBetween0And1
    vested_carry: MoneyAmount
    distributed_carry: MoneyAmount
    irr: Optional[float] = None
    irr_unavailable_reason: Optional[IRRUnavailableReason] = None
    moic: float
    waterfall: List[TierBreakdownResult] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_vested(self) -> "CarryAccrual":
        if self.vested_carry > self.accrued_carry:
            raise ValueError("Vested carry cannot exceed accrued carry")
        return self

    @computed_field
    @property
    def total_value(self) -> Decimal:
        return self.total_distributions + self.unrealized_value

    @computed_field
    @property
    def realized_gains(self) -> Decimal:
        """Distributions in excess of contributions; distributions return capital first."""
        return max(self.total_distributions - self.total_contributions, ZERO)

    @computed_field
    @property
    def unrealized_gains(self) -> Decimal:
        """Remaining gain (negative for a loss) once realized gains are taken out."""
        return self.total_value - self.total_contributions - self.realized_gains

    @computed_field
    @property
    def unvested_carry(self) -> Decimal:
        return self.accrued_carry - self.vested_carry

    @computed_field
    @property
    def remaining_carry(self) -> Decimal:
        return self.accrued_carry - self.distributed_carry


class ClawbackSummary(Model):
    total_carry_paid: MoneyAmount
    required_return: MoneyAmount
    shortfall: MoneyAmount
    clawback_due: MoneyAmount
    net_carry_after_clawback: MoneyAmount
    status: ClawbackStatusEnum


class LookbackSummary(Model):
    lookback_years: float
    losses_to_recover: MoneyAmount
    carry_at_risk: MoneyAmount
    carry_released: MoneyAmount
    status: LookbackStatusEnum


class WaterfallResult(Model):
    """
    Complete outcome of evaluating one scenario.

    ``lp_allocations`` is keyed by investor class id and only populated when
    LP detail was requested. GP amounts that no GP class could receive are
    reported in ``unallocated_gp_amount`` rather than dropped.
    ``gp_management_fees`` is the scenario's fees rounded to minor units; they
    sit outside the waterfall and the conservation identities.
    """

    scenario_id: str
    model: WaterfallModelEnum
    exit_value: MoneyAmount
    total_invested: MoneyAmount
    tier_breakdown: List[TierBreakdownResult]
    investor_class_results: List[InvestorClassResult]
    metrics: FundMetrics
    carry: Optional[CarryAccrual] = None
    lp_allocations: Dict[str, List[LPAllocation]] = Field(default_factory=dict)
    clawback: Optional[ClawbackSummary] = None
    lookback: Optional[LookbackSummary] = None
    unallocated_gp_amount: MoneyAmount = ZERO
    gp_management_fees: MoneyAmount = ZERO

    @computed_field
    @property
    def gp_total(self) -> Decimal:
        return sum((t.gp_amount for t in self.tier_breakdown), ZERO)

    @computed_field
    @property
    def lp_total(self) -> Decimal:
        return sum((t.lp_amount for t in self.tier_breakdown), ZERO)

    @computed_field
    @property
    def gp_carry_percentage(self) -> float:
        """GP share of total proceeds, percent."""
        if self.exit_value <= 0:
            return 0.0
        return float(self.gp_total / self.exit_value * 100)

    def investor_class(self, investor_class_id: str) -> InvestorClassResult:
        """Look up one class result by id."""
        for result in self.investor_class_results:
            if result.investor_class_id == investor_class_id:
                return result
        raise KeyError(f"Investor class '{investor_class_id}' not found")


class ComparisonRow(Model):
    """Headline figures of one scenario in a comparison."""

    scenario_id: str
    scenario_name: str
    model: WaterfallModelEnum
    exit_value: MoneyAmount
    gp_carry: MoneyAmount
    gp_carry_percentage: float
    lp_return: MoneyAmount
    total_multiple: float
    irr: Optional[float] = None


class ScenarioComparison(Model):
    """Independent results for several scenarios, keyed by scenario id."""

    results: Dict[str, WaterfallResult]
    comparison_metrics: List[ComparisonRow]

    def __getitem__(self, scenario_id: str) -> WaterfallResult:
        return self.results[scenario_id]


__all__ = [
    "CarryAccrual",
    "ClawbackSummary",
    "ComparisonRow",
    "ScenarioComparison",
    "FundMetrics",
    "InvestorClassResult",
    "LPAllocation",
    "LookbackSummary",
    "TierBreakdownResult",
    "WaterfallResult",
]
