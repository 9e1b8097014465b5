# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Clawback and lookback summaries.

Both are reporting overlays on a finished waterfall: they do not change the
tier allocation, they estimate how much of the GP's carry is exposed.
"""

from __future__ import annotations

from decimal import Decimal

from ..core.money import HUNDRED, ZERO, to_money
from ..core.primitives import ClawbackStatusEnum, LookbackStatusEnum
from .results import ClawbackSummary, LookbackSummary
from .scenario import ClawbackProvision, LookbackProvision


def summarize_clawback(
    provision: ClawbackProvision,
    total_invested: Decimal,
    lp_total: Decimal,
    gp_carry: Decimal,
    places: int = 2,
) -> ClawbackSummary:
    """
    Test LP proceeds against a simple-interest hurdle and size the clawback.

    ``required_return = invested * (1 + hurdle% * years)``; the clawback is
    ``clawback_rate%`` of the shortfall, capped at the carry paid.
    """
    years = Decimal(str(provision.distribution_life_years))
    required = to_money(
        total_invested * (1 + provision.hurdle_rate / HUNDRED * years), places
    )
    shortfall = max(ZERO, required - lp_total)
    clawback_due = to_money(
        min(gp_carry, shortfall * provision.clawback_rate / HUNDRED), places
    )

    if clawback_due > 0:
        status = ClawbackStatusEnum.TRIGGERED
    elif shortfall > 0:
        status = ClawbackStatusEnum.AT_RISK
    else:
        status = ClawbackStatusEnum.CLEAR

    return ClawbackSummary(
        total_carry_paid=gp_carry,
        required_return=required,
        shortfall=shortfall,
        clawback_due=clawback_due,
        net_carry_after_clawback=max(ZERO, gp_carry - clawback_due),
        status=status,
    )


def summarize_lookback(
    provision: LookbackProvision,
    gp_carry: Decimal,
    places: int = 2,
) -> LookbackSummary:
    """Hold back ``carry_at_risk_rate%`` of carry while prior losses remain."""
    losses = max(ZERO, provision.loss_carry_forward)
    at_risk = to_money(gp_carry * provision.carry_at_risk_rate / HUNDRED, places)

    if losses > 0:
        status = LookbackStatusEnum.AT_RISK if at_risk > 0 else LookbackStatusEnum.MONITOR
    else:
        status = LookbackStatusEnum.CLEARED

    return LookbackSummary(
        lookback_years=provision.lookback_years,
        losses_to_recover=losses,
        carry_at_risk=at_risk,
        carry_released=max(ZERO, gp_carry - at_risk),
        status=status,
    )


__all__ = ["summarize_clawback", "summarize_lookback"]
