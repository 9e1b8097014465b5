# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Minor-unit money arithmetic on `decimal.Decimal`.

All monetary values produced by the engine are quantized to the currency's
minor unit (cents by default). Splits and pro-rata allocations work in whole
minor units so the parts always add back to the whole exactly.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import List, Sequence, Tuple, Union

from .errors import InvalidInputError, NoOwnershipDataError

Number = Union[Decimal, int, str]

HUNDRED = Decimal(100)
ZERO = Decimal(0)


def quantum(places: int = 2) -> Decimal:
    """Smallest representable amount for the given precision (0.01 for cents)."""
    return Decimal(1).scaleb(-places)


def to_money(value: Number, places: int = 2, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    """
    Quantize a value to minor units, using banker's rounding by default.

    Raises:
        InvalidInputError: If the value is not a number, or is too large to
            hold at minor-unit precision in the decimal context
    """
    try:
        return Decimal(value).quantize(quantum(places), rounding=rounding)
    except InvalidOperation as e:
        raise InvalidInputError(
            f"Amount {value} cannot be represented to {places} decimal places"
        ) from e


def split_amount(
    amount: Decimal, gp_share_percent: Decimal, places: int = 2
) -> Tuple[Decimal, Decimal]:
    """
    Split an amount into (lp, gp) sides.

    The GP side is rounded down to the minor unit and the LP side takes the
    remainder, so rounding never shortchanges investors and ``lp + gp`` always
    equals ``amount``.
    """
    gp = to_money(amount * gp_share_percent / HUNDRED, places, rounding=ROUND_DOWN)
    return amount - gp, gp


def allocate_pro_rata(
    amount: Decimal, weights: Sequence[Decimal], places: int = 2
) -> List[Decimal]:
    """
    Allocate a non-negative amount across weights in whole minor units.

    Uses the largest-remainder method: every part is floored, and leftover
    units go to the parts with the largest fractional remainders (ties broken
    by position), so the result sums to ``amount`` exactly and is deterministic.

    Raises:
        NoOwnershipDataError: If the weights sum to zero.
    """
    total_weight = sum(weights, ZERO)
    if total_weight <= 0:
        raise NoOwnershipDataError("Cannot pro-rate an amount across zero total weight")
    if amount < 0:
        raise ValueError(f"Pro-rata allocation requires a non-negative amount, got {amount}")

    unit = quantum(places)
    total_units = int(to_money(amount, places) / unit)

    raw = [Decimal(total_units) * w / total_weight for w in weights]
    floors = [int(r) for r in raw]
    leftover = total_units - sum(floors)

    by_remainder = sorted(
        range(len(weights)), key=lambda i: (-(raw[i] - floors[i]), i)
    )
    for i in by_remainder[:leftover]:
        floors[i] += 1

    return [Decimal(units) * unit for units in floors]


__all__ = [
    "HUNDRED",
    "ZERO",
    "allocate_pro_rata",
    "quantum",
    "split_amount",
    "to_money",
]
