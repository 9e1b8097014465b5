# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity models for fund participants and fund cash flows.

Investor classes group investors that share economics (one LP class, one GP
class, or several LP share classes). Limited partners are the individual
holders inside an LP class, used only for drill-down allocation.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import List

from pydantic import Field, model_validator

from ..core.primitives import (
    CashFlowTypeEnum,
    InvestorKindEnum,
    Model,
    MoneyAmount,
    Percentage,
)


class LimitedPartner(Model):
    """Individual holder inside an investor class."""

    id: str = Field(..., min_length=1, description="Stable limited partner identifier")
    name: str = Field(..., description="Display name")
    ownership_percentage: Percentage = Field(
        ..., description="Share of its investor class (not of the fund), 0-100"
    )
    commitment: MoneyAmount = Field(default=Decimal(0), description="Committed capital")

    def __str__(self) -> str:
        return f"{self.name}: {self.ownership_percentage}% of class"


class InvestorClass(Model):
    """
    Group of investors receiving one side (LP or GP) of the waterfall.

    ``ownership_percentage`` is the class's share of its side's distributions.
    When several LP classes exist the LP side of every tier is split between
    them pro-rata by this percentage (unless a tier targets one class).

    Example:
        ```python
        lp_class = InvestorClass(
            id="class-a",
            name="Class A",
            kind="LP",
            ownership_percentage=100,
            commitment=40_000_000,
        )
        ```
    """

    id: str = Field(..., min_length=1, description="Stable investor class identifier")
    name: str = Field(..., description="Display name")
    kind: InvestorKindEnum = Field(..., description="LP or GP side of the waterfall")
    ownership_percentage: Percentage = Field(
        default=Decimal(100), description="Share of its side's distributions, 0-100"
    )
    commitment: MoneyAmount = Field(default=Decimal(0), description="Committed capital")
    contributed: MoneyAmount = Field(
        default=Decimal(0), description="Capital actually called to date"
    )
    limited_partners: List[LimitedPartner] = Field(
        default_factory=list, description="Optional roster for per-LP drill-down"
    )

    @model_validator(mode="after")
    def validate_roster(self) -> "InvestorClass":
        if self.limited_partners and self.kind is InvestorKindEnum.GP:
            raise ValueError(f"GP class '{self.id}' cannot carry a limited partner roster")
        ids = [lp.id for lp in self.limited_partners]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate limited partner ids in class '{self.id}'")
        return self

    @property
    def is_lp(self) -> bool:
        return self.kind is InvestorKindEnum.LP

    def __str__(self) -> str:
        return f"{self.name} ({self.kind.value}): {self.ownership_percentage}%"


class CashFlow(Model):
    """
    Dated fund-level cash flow.

    Amounts are non-negative magnitudes; ``flow_type`` determines the sign
    when the flow enters an IRR series.
    """

    date: datetime.date
    amount: MoneyAmount
    flow_type: CashFlowTypeEnum


__all__ = [
    "CashFlow",
    "InvestorClass",
    "LimitedPartner",
]
