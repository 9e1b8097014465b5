# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tier Evaluator

Walks a proceeds amount through an ordered list of tiers. Each tier takes at
most its width (``tier_end - tier_start``) from what is still undistributed
and splits it between the LP and GP sides. The walk is strictly in order and
never skips ahead: a tier only receives money once every earlier tier is full.

Rounding:
    The GP side of a tier is rounded down to the currency's minor unit and the
    LP side takes the remainder, so ``lp + gp == total`` holds exactly and any
    rounding difference favors the LPs.

Invariants checked on every call:
    - Tier totals sum to the proceeds
    - The last cumulative amount equals the proceeds
    - Each tier's LP and GP amounts sum to its total
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from ..core.errors import ConservationError, InvalidInputError
from ..core.money import HUNDRED, ZERO, split_amount, to_money
from ..core.primitives import PrecisionSettings
from .results import TierBreakdownResult
from .tiers import BaseTier

logger = logging.getLogger(__name__)

TierBounds = Tuple[Decimal, Optional[Decimal]]


def resolve_tier_bounds(
    tiers: Sequence[BaseTier],
    settings: Optional[PrecisionSettings] = None,
) -> List[TierBounds]:
    """
    Validate a tier sequence and return its absolute ``(start, end)`` bounds.

    Rules:
        - At least one tier; the first starts at 0
        - Each tier starts where the previous one ends (omitted starts are inferred)
        - Only the final tier may be unbounded
        - ``end >= start`` for every bounded tier
        - LP and GP shares sum to 100 within the configured tolerance

    Raises:
        InvalidInputError: If any rule is violated.
    """
    settings = settings or PrecisionSettings()
    places = settings.currency_decimal_places
    tolerance = Decimal(str(settings.percent_sum_tolerance))

    if not tiers:
        raise InvalidInputError("A waterfall needs at least one tier")

    bounds: List[TierBounds] = []
    previous_end: Optional[Decimal] = ZERO
    last_index = len(tiers) - 1

    for index, tier in enumerate(tiers):
        split_total = tier.lp_share_percent + tier.gp_share_percent
        if abs(split_total - HUNDRED) > tolerance:
            raise InvalidInputError(
                f"Tier '{tier.name}' split sums to {split_total}%, expected 100%"
            )

        if previous_end is None:
            raise InvalidInputError(
                f"Tier '{tier.name}' follows an unbounded tier; only the final tier may be unbounded"
            )

        start = previous_end if tier.tier_start is None else to_money(tier.tier_start, places)
        if start != previous_end:
            expected = "0" if index == 0 else f"{previous_end}"
            raise InvalidInputError(
                f"Tier '{tier.name}' starts at {start}; expected {expected} (tiers must be contiguous)"
            )

        if tier.tier_end is None:
            if index != last_index:
                raise InvalidInputError(
                    f"Tier '{tier.name}' is unbounded but is not the final tier"
                )
            end = None
        else:
            end = to_money(tier.tier_end, places)
            if end < start:
                raise InvalidInputError(
                    f"Tier '{tier.name}' ends at {end}, before its start {start}"
                )

        bounds.append((start, end))
        previous_end = end

    return bounds


@dataclass
class TierEvaluator:
    """
    Allocates proceeds across an ordered tier list.

    Attributes:
        settings: Precision settings (minor-unit places, split tolerance)

    Example:
        ```python
        evaluator = TierEvaluator()
        breakdown = evaluator.evaluate(tiers, Decimal("100000000"))
        gp_total = sum(t.gp_amount for t in breakdown)
        ```
    """

    settings: PrecisionSettings = field(default_factory=PrecisionSettings)

    def evaluate(
        self, tiers: Sequence[BaseTier], proceeds: Decimal
    ) -> List[TierBreakdownResult]:
        """
        Allocate ``proceeds`` across ``tiers``.

        Returns one breakdown entry per tier, in tier order; tiers the
        proceeds never reach are reported with zero amounts.

        Raises:
            InvalidInputError: Negative proceeds, malformed tiers, or proceeds
                beyond the end of a bounded final tier
            ConservationError: If an allocation invariant is violated
        """
        places = self.settings.currency_decimal_places
        proceeds = Decimal(proceeds)
        if not proceeds.is_finite() or proceeds < 0:
            raise InvalidInputError(f"Proceeds must be a non-negative amount, got {proceeds}")
        proceeds = to_money(proceeds, places)

        bounds = resolve_tier_bounds(tiers, self.settings)
        final_end = bounds[-1][1]
        if final_end is not None and proceeds > final_end:
            raise InvalidInputError(
                f"Proceeds {proceeds} exceed the final tier's end {final_end}; "
                "add an unbounded residual tier"
            )

        remaining = proceeds
        cumulative = ZERO
        breakdown: List[TierBreakdownResult] = []

        for tier, (start, end) in zip(tiers, bounds):
            if end is None:
                amount = remaining
            else:
                amount = min(remaining, end - start)

            lp_amount, gp_amount = split_amount(amount, tier.gp_share_percent, places)
            cumulative += amount
            remaining -= amount

            breakdown.append(
                TierBreakdownResult(
                    tier_name=tier.name,
                    tier_type=tier.kind,
                    tier_start=start,
                    tier_end=end,
                    total_amount=amount,
                    cumulative_amount=cumulative,
                    lp_amount=lp_amount,
                    gp_amount=gp_amount,
                    proceeds=proceeds,
                )
            )

        check_conservation(breakdown, proceeds)
        logger.debug(
            f"Allocated {proceeds} across {len(breakdown)} tiers "
            f"(GP {sum((t.gp_amount for t in breakdown), ZERO)})"
        )
        return breakdown


def check_conservation(
    breakdown: Sequence[TierBreakdownResult], proceeds: Decimal
) -> None:
    """Raise ConservationError unless the breakdown distributes exactly ``proceeds``."""
    total = sum((t.total_amount for t in breakdown), ZERO)
    if total != proceeds:
        raise ConservationError(f"Tier totals {total} do not sum to proceeds {proceeds}")
    if breakdown and breakdown[-1].cumulative_amount != proceeds:
        raise ConservationError(
            f"Final cumulative amount {breakdown[-1].cumulative_amount} "
            f"does not equal proceeds {proceeds}"
        )
    for tier in breakdown:
        if tier.lp_amount + tier.gp_amount != tier.total_amount:
            raise ConservationError(f"Tier '{tier.tier_name}' split does not conserve")


__all__ = ["TierEvaluator", "check_conservation", "resolve_tier_bounds"]
