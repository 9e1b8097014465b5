# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carry Accrual Tracker

Computes the GP's carried interest position at a date from the fund's dated
cash flows:

1. Only flows dated on or before ``as_of_date`` are considered.
2. The LP preferred return accrues on each contribution from its own date to
   ``as_of_date`` at the hurdle rate.
3. A four-tier waterfall is synthesized from the term (return of capital,
   preferred return, catch-up, residual split) and the distributions to date
   plus any unrealized value are run through it. The GP side is the accrued
   carry.
4. The vesting schedule decides how much of the accrued carry is vested.
5. Carry already paid out (``carry_payment`` flows) is subtracted to give the
   remaining carry. Paying out more than has accrued is an error, never
   clamped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_DOWN, Decimal
from typing import Iterable, List, Optional, Sequence

from dateutil.relativedelta import relativedelta

from ..core.calculations import FinancialCalculations
from ..core.errors import (
    CarryOverdistributedError,
    InvalidInputError,
    NoCapitalInvestedError,
)
from ..core.money import HUNDRED, ZERO, to_money
from ..core.primitives import (
    AccelerationTriggerEnum,
    CashFlowTypeEnum,
    EngineSettings,
    TierTypeEnum,
)
from .constructs import catch_up_amount
from .entities import CashFlow
from .metrics import PerformanceMetricsCalculator
from .results import CarryAccrual, TierBreakdownResult
from .tier_evaluator import TierEvaluator
from .tiers import (
    BaseTier,
    CarriedInterestTerm,
    CatchUpTier,
    PreferredReturnTier,
    ResidualSplitTier,
    ReturnOfCapitalTier,
)

logger = logging.getLogger(__name__)


def months_between(start: date, end: date) -> int:
    """
    Whole calendar months from ``start`` to ``end``.

    A month elapses when ``end`` reaches the day-of-month of ``start``, or the
    last day of a shorter month (so 31 Jan to 28 Feb is one month). Returns 0
    if ``end`` precedes ``start``.
    """
    if end <= start:
        return 0
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def build_carry_tiers(
    term: CarriedInterestTerm,
    total_contributions: Decimal,
    preferred_return: Decimal,
    places: int = 2,
) -> List[BaseTier]:
    """Synthesize the four-tier waterfall implied by a carried-interest term."""
    catchup_width = catch_up_amount(
        preferred_return,
        term.gp_carry_percentage,
        term.catchup_percentage,
        preferred_return_lp_share=term.preferred_return,
        catchup_cap=term.catchup_cap,
        places=places,
    )
    pref_end = total_contributions + preferred_return
    return [
        ReturnOfCapitalTier(
            name="Return of Capital", tier_start=ZERO, tier_end=total_contributions
        ),
        PreferredReturnTier(
            name="Preferred Return",
            lp_share_percent=term.preferred_return,
            gp_share_percent=HUNDRED - term.preferred_return,
            tier_end=pref_end,
        ),
        CatchUpTier(
            name="GP Catch-Up",
            lp_share_percent=HUNDRED - term.catchup_percentage,
            gp_share_percent=term.catchup_percentage,
            tier_end=pref_end + catchup_width,
        ),
        ResidualSplitTier(
            name="Carried Interest",
            lp_share_percent=HUNDRED - term.gp_carry_percentage,
            gp_share_percent=term.gp_carry_percentage,
        ),
    ]


@dataclass
class CarryAccrualTracker:
    """
    Tracks accrued, vested and distributed carry for one carried-interest term.

    Attributes:
        settings: Engine settings (precision, day count, solver)

    Example:
        ```python
        tracker = CarryAccrualTracker()
        accrual = tracker.accrue(
            term,
            cash_flows=[
                CashFlow(date=date(2021, 1, 1), amount=40_000_000, flow_type="contribution"),
                CashFlow(date=date(2024, 1, 1), amount=60_000_000, flow_type="distribution"),
            ],
            as_of_date=date(2024, 1, 1),
        )
        print(accrual.accrued_carry, accrual.remaining_carry)
        ```
    """

    settings: EngineSettings = field(default_factory=EngineSettings)

    def accrue(
        self,
        term: CarriedInterestTerm,
        cash_flows: Sequence[CashFlow],
        as_of_date: date,
        unrealized_value: Decimal = ZERO,
        events: Iterable[AccelerationTriggerEnum] = (),
    ) -> CarryAccrual:
        """
        Compute the carry position at ``as_of_date``.

        Args:
            term: Carried-interest term (carry %, hurdle, catch-up, vesting)
            cash_flows: Fund-level dated flows; later-dated flows are ignored
            as_of_date: Valuation date
            unrealized_value: Value still held, treated as a hypothetical
                liquidation distribution on ``as_of_date``
            events: Acceleration events that have occurred

        Raises:
            InvalidInputError: Negative unrealized value
            NoCapitalInvestedError: No contributions on or before ``as_of_date``
            CarryOverdistributedError: Carry paid exceeds carry accrued
        """
        places = self.settings.precision.currency_decimal_places
        unrealized = Decimal(unrealized_value)
        if not unrealized.is_finite() or unrealized < 0:
            raise InvalidInputError(
                f"Unrealized value must be a non-negative amount, got {unrealized_value}"
            )
        unrealized = to_money(unrealized, places)

        in_scope = [cf for cf in cash_flows if cf.date <= as_of_date]
        contributions = [cf for cf in in_scope if cf.flow_type is CashFlowTypeEnum.CONTRIBUTION]
        distributions = [cf for cf in in_scope if cf.flow_type is CashFlowTypeEnum.DISTRIBUTION]
        carry_payments = [cf for cf in in_scope if cf.flow_type is CashFlowTypeEnum.CARRY_PAYMENT]

        total_contributions = to_money(sum((cf.amount for cf in contributions), ZERO), places)
        total_distributions = to_money(sum((cf.amount for cf in distributions), ZERO), places)
        if total_contributions == 0:
            raise NoCapitalInvestedError(
                f"No contributions on or before {as_of_date}; carry cannot accrue"
            )

        preferred = self.preferred_return(term, contributions, as_of_date)
        tiers = build_carry_tiers(term, total_contributions, preferred, places)
        breakdown = TierEvaluator(self.settings.precision).evaluate(
            tiers, total_distributions + unrealized
        )

        accrued = sum((t.gp_amount for t in breakdown), ZERO)
        pref_paid = self._tier(breakdown, TierTypeEnum.PREFERRED_RETURN).lp_amount
        catchup_tier = self._tier(breakdown, TierTypeEnum.GP_CATCH_UP)
        catchup_width = catchup_tier.tier_end - catchup_tier.tier_start

        start = term.effective_date or min(cf.date for cf in contributions)
        fraction = term.vesting_schedule.vested_fraction(
            months_between(start, as_of_date), events
        )
        vested = min(
            accrued,
            to_money(accrued * Decimal(str(fraction)), places, rounding=ROUND_DOWN),
        )

        distributed = to_money(sum((cf.amount for cf in carry_payments), ZERO), places)
        if distributed > accrued:
            raise CarryOverdistributedError(
                f"Carry paid ({distributed}) exceeds carry accrued ({accrued}) as of {as_of_date}"
            )

        fund_metrics = PerformanceMetricsCalculator(self.settings).metrics(
            contributions, distributions, unrealized, nav_date=as_of_date
        )

        logger.info(
            f"Carry as of {as_of_date}: accrued {accrued}, vested {vested} "
            f"({fraction:.1%}), distributed {distributed}"
        )

        return CarryAccrual(
            as_of_date=as_of_date,
            total_contributions=total_contributions,
            total_distributions=total_distributions,
            unrealized_value=unrealized,
            lp_preferred_return=preferred,
            lp_preferred_return_paid=pref_paid,
            catchup_amount=catchup_width,
            catchup_paid=catchup_tier.total_amount,
            accrued_carry=accrued,
            vested_fraction=fraction,
            vested_carry=vested,
            distributed_carry=distributed,
            irr=fund_metrics.irr,
            irr_unavailable_reason=fund_metrics.irr_unavailable_reason,
            moic=fund_metrics.moic,
            waterfall=breakdown,
        )

    def preferred_return(
        self,
        term: CarriedInterestTerm,
        contributions: Iterable[CashFlow],
        as_of_date: date,
    ) -> Decimal:
        """
        Preferred return owed on contributions at ``as_of_date``.

        ``sum(c_i * ((1 + hurdle) ** years_i - 1))`` with ``years_i`` measured
        from each contribution date under the configured day count.
        """
        rate = term.hurdle_rate / HUNDRED
        total = ZERO
        for cf in contributions:
            years = FinancialCalculations.year_fraction(cf.date, as_of_date, self.settings.day_count)
            growth = FinancialCalculations.growth_factor(
                rate, Decimal(str(max(0.0, years))), compounding=term.compounding
            )
            total += cf.amount * (growth - 1)
        return to_money(total, self.settings.precision.currency_decimal_places)

    @staticmethod
    def _tier(
        breakdown: Sequence[TierBreakdownResult], tier_type: TierTypeEnum
    ) -> TierBreakdownResult:
        return next(t for t in breakdown if t.tier_type is tier_type)


def accrue_carry(
    term: CarriedInterestTerm,
    cash_flows: Sequence[CashFlow],
    as_of_date: date,
    unrealized_value: Decimal = ZERO,
    events: Iterable[AccelerationTriggerEnum] = (),
    settings: Optional[EngineSettings] = None,
) -> CarryAccrual:
    """Compute the carry position at a date with default or supplied settings."""
    tracker = CarryAccrualTracker(settings or EngineSettings())
    return tracker.accrue(term, cash_flows, as_of_date, unrealized_value, events)


__all__ = [
    "CarryAccrualTracker",
    "accrue_carry",
    "build_carry_tiers",
    "months_between",
]
