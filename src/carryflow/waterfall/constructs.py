# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Waterfall Constructs - Tier and Investor Class Builders

Builders that compose the primitive models into ready-to-evaluate pieces.
Every output is an ordinary model that can be inspected and modified.

## Available Constructs

#### `create_standard_waterfall()`
Four-tier whole-fund waterfall with absolute bounds: return of capital,
preferred return, GP catch-up and a residual carry split.

**Example** (40M invested, 10% simple hurdle for 3 years, 20% carry, full catch-up):
- Return of capital: 0 - 40M
- Preferred return: 40M - 52M
- GP catch-up: 52M - 55M
- Residual 80/20: 55M and above

#### `catch_up_amount()`
Width of the catch-up tier that brings the GP to its carry share of profits.
Shared with the carry accrual tracker so both build identical tiers.

#### `create_simple_fund()`
One LP class and one GP class.

#### `create_fund_from_commitments()`
One LP class per commitment with ownership pro-rata to commitment, plus a
GP class.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Tuple

from ..core.calculations import FinancialCalculations
from ..core.money import HUNDRED, ZERO, to_money
from ..core.primitives import InvestorKindEnum
from .entities import InvestorClass
from .tiers import (
    BaseTier,
    CatchUpTier,
    PreferredReturnTier,
    ResidualSplitTier,
    ReturnOfCapitalTier,
)


def catch_up_amount(
    preferred_return_amount: Decimal,
    gp_carry_percentage: Decimal,
    catchup_percentage: Decimal,
    preferred_return_lp_share: Decimal = HUNDRED,
    catchup_cap: Optional[Decimal] = None,
    places: int = 2,
) -> Decimal:
    """
    Size of the catch-up tier.

    With carry share ``k``, catch-up share ``c`` and a preferred return ``P``
    paid 100% to LPs, the GP reaches ``k`` of all profits after
    ``X = k * P / (c - k)``. When part of the preferred-return tier already
    goes to the GP only the missing part is caught up. ``catchup_cap`` bounds
    the result.

    When ``c <= k`` the catch-up never completes: the width is the cap if one
    is given, otherwise zero.

    Returns:
        Catch-up width in minor units (never negative)
    """
    k = Decimal(gp_carry_percentage) / HUNDRED
    c = Decimal(catchup_percentage) / HUNDRED
    gp_pref_share = (HUNDRED - Decimal(preferred_return_lp_share)) / HUNDRED

    if c <= k:
        width = Decimal(catchup_cap) if catchup_cap is not None else ZERO
    else:
        shortfall = (k - gp_pref_share) * Decimal(preferred_return_amount)
        width = max(ZERO, shortfall / (c - k))
        if catchup_cap is not None:
            width = min(width, Decimal(catchup_cap))
    return to_money(width, places)


def create_standard_waterfall(
    total_invested: Decimal,
    hurdle_rate: Decimal,
    holding_period_years: Decimal,
    gp_carry_percentage: Decimal = Decimal(20),
    catchup_percentage: Decimal = Decimal(100),
    compounding: bool = False,
    catchup_cap: Optional[Decimal] = None,
    places: int = 2,
) -> List[BaseTier]:
    """
    Build a return of capital / preferred return / catch-up / residual waterfall.

    Args:
        total_invested: Capital returned in the first tier
        hurdle_rate: Annual preferred return, percent (8 for 8%)
        holding_period_years: Years the hurdle accrues for
        gp_carry_percentage: GP share of the residual split, percent
        catchup_percentage: GP share of the catch-up tier, percent
        compounding: Compound the hurdle annually instead of simple interest
        catchup_cap: Optional maximum size of the catch-up tier

    Returns:
        Four tiers with absolute bounds; the residual tier is unbounded.

    Example:
        ```python
        tiers = create_standard_waterfall(40_000_000, 10, 3)
        [t.tier_end for t in tiers]
        # [Decimal('40000000.00'), Decimal('52000000.00'), Decimal('55000000.00'), None]
        ```
    """
    invested = to_money(Decimal(total_invested), places)
    if invested < 0:
        raise ValueError(f"total_invested must be non-negative, got {total_invested}")

    rate = Decimal(hurdle_rate) / HUNDRED
    growth = FinancialCalculations.growth_factor(
        rate, Decimal(holding_period_years), compounding=compounding
    )
    preferred = to_money(invested * (growth - 1), places)

    gp_carry = Decimal(gp_carry_percentage)
    catchup = Decimal(catchup_percentage)
    catchup_width = catch_up_amount(
        preferred, gp_carry, catchup, catchup_cap=catchup_cap, places=places
    )

    pref_end = invested + preferred
    catchup_end = pref_end + catchup_width

    return [
        ReturnOfCapitalTier(name="Return of Capital", tier_start=ZERO, tier_end=invested),
        PreferredReturnTier(name="Preferred Return", tier_end=pref_end),
        CatchUpTier(
            name="GP Catch-Up",
            lp_share_percent=HUNDRED - catchup,
            gp_share_percent=catchup,
            tier_end=catchup_end,
        ),
        ResidualSplitTier(
            name="Carried Interest",
            lp_share_percent=HUNDRED - gp_carry,
            gp_share_percent=gp_carry,
        ),
    ]


def create_simple_fund(
    lp_commitment: Decimal,
    gp_commitment: Decimal = ZERO,
    lp_name: str = "Limited Partners",
    gp_name: str = "General Partner",
) -> List[InvestorClass]:
    """
    Helper function to create one LP class and one GP class.

    Both classes are fully called (``contributed == commitment``).
    """
    return [
        InvestorClass(
            id="lp",
            name=lp_name,
            kind=InvestorKindEnum.LP,
            ownership_percentage=HUNDRED,
            commitment=lp_commitment,
            contributed=lp_commitment,
        ),
        InvestorClass(
            id="gp",
            name=gp_name,
            kind=InvestorKindEnum.GP,
            ownership_percentage=HUNDRED,
            commitment=gp_commitment,
            contributed=gp_commitment,
        ),
    ]


def create_fund_from_commitments(
    lp_commitments: List[Tuple[str, Decimal]],
    gp_name: str = "General Partner",
) -> List[InvestorClass]:
    """
    Create LP classes with ownership pro-rata to their commitments.

    This simplifies the common case where each share class's cut of the LP
    side is proportional to the capital it committed.

    Args:
        lp_commitments: List of (class name, commitment) tuples
        gp_name: Name of the single GP class

    Raises:
        ValueError: If no commitments are given or they sum to zero.
    """
    total = sum((Decimal(amount) for _, amount in lp_commitments), ZERO)
    if not lp_commitments or total <= 0:
        raise ValueError("At least one positive LP commitment is required")

    classes = [
        InvestorClass(
            id=f"lp-{index + 1}",
            name=name,
            kind=InvestorKindEnum.LP,
            ownership_percentage=Decimal(amount) / total * HUNDRED,
            commitment=amount,
            contributed=amount,
        )
        for index, (name, amount) in enumerate(lp_commitments)
    ]
    classes.append(
        InvestorClass(id="gp", name=gp_name, kind=InvestorKindEnum.GP)
    )
    return classes


__all__ = [
    "catch_up_amount",
    "create_fund_from_commitments",
    "create_simple_fund",
    "create_standard_waterfall",
]
