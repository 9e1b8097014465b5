# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Investor-Class Allocator

Splits an investor class's invested and returned amounts across its limited
partners by ownership percentage. Shares are normalized by the observed sum of
ownership percentages, so a roster that does not add up to exactly 100% is
still allocated in full (and a notice is logged). Amounts are divided in whole
minor units with the largest-remainder method, so the per-LP figures always
sum back to the class figures.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from ..core.errors import ConservationError, NoOwnershipDataError
from ..core.money import HUNDRED, ZERO, allocate_pro_rata, to_money
from ..core.primitives import PrecisionSettings
from .entities import LimitedPartner
from .results import InvestorClassResult, LPAllocation

logger = logging.getLogger(__name__)


def allocate_to_lps(
    class_result: InvestorClassResult,
    limited_partners: Sequence[LimitedPartner],
    settings: Optional[PrecisionSettings] = None,
) -> List[LPAllocation]:
    """
    Allocate a class result to its limited partners.

    Class totals are quantized to the minor unit before allocating, so the
    allocations reconstruct the rounded totals exactly.

    Args:
        class_result: Invested and returned totals of the investor class
        limited_partners: Roster with ownership percentages of the class
        settings: Precision settings; defaults when omitted

    Returns:
        One allocation per limited partner, in roster order

    Raises:
        NoOwnershipDataError: If the roster is empty or ownership sums to zero
        ConservationError: If the allocations fail to reconstruct the class totals

    Example:
        ```python
        allocations = allocate_to_lps(
            class_result,
            [
                LimitedPartner(id="a", name="Pension A", ownership_percentage=60),
                LimitedPartner(id="b", name="Endowment B", ownership_percentage=40),
            ],
        )
        ```
    """
    settings = settings or PrecisionSettings()
    places = settings.currency_decimal_places

    share_denominator = sum((lp.ownership_percentage for lp in limited_partners), ZERO)
    if share_denominator <= 0:
        raise NoOwnershipDataError(
            f"Investor class '{class_result.investor_class_id}' has no ownership data"
        )
    if share_denominator != HUNDRED:
        logger.info(
            f"Ownership for class '{class_result.investor_class_id}' sums to "
            f"{share_denominator}%; normalizing shares by the observed total"
        )

    # Class totals are reconstructed at minor-unit precision
    class_invested = to_money(class_result.invested, places)
    class_returned = to_money(class_result.returned, places)

    weights = [lp.ownership_percentage for lp in limited_partners]
    invested = allocate_pro_rata(class_invested, weights, places)
    returned = allocate_pro_rata(class_returned, weights, places)

    _check_reconstruction(class_invested, invested, settings, "invested")
    _check_reconstruction(class_returned, returned, settings, "returned")

    return [
        LPAllocation(
            limited_partner_id=lp.id,
            name=lp.name,
            ownership_percentage=lp.ownership_percentage,
            normalized_share=float(lp.ownership_percentage / share_denominator),
            commitment=lp.commitment,
            invested=lp_invested,
            returned=lp_returned,
        )
        for lp, lp_invested, lp_returned in zip(limited_partners, invested, returned)
    ]


def _check_reconstruction(
    expected: Decimal,
    parts: Sequence[Decimal],
    settings: PrecisionSettings,
    label: str,
) -> None:
    total = sum(parts, ZERO)
    tolerance = Decimal(str(settings.reconstruction_tolerance)) * max(abs(expected), Decimal(1))
    if abs(total - expected) > tolerance:
        raise ConservationError(
            f"LP {label} amounts sum to {total}, expected {expected}"
        )


__all__ = ["allocate_to_lps"]
