# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exit value sensitivity analysis.

Sweeps a scenario across a range of exit values, evaluating an independent
copy of the scenario at each point, and records where each tier first starts
receiving proceeds (its break-even exit value).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Optional, Set

import pandas as pd
from pydantic import Field

from ..core.calculations import FinancialCalculations
from ..core.errors import InvalidInputError
from ..core.money import ZERO, to_money
from ..core.primitives import EngineSettings, InvestorKindEnum, Model, MoneyAmount
from .api import evaluate_scenario
from .scenario import WaterfallScenario

logger = logging.getLogger(__name__)


class SensitivityDataPoint(Model):
    exit_value: MoneyAmount
    gp_carry: MoneyAmount
    gp_carry_percentage: float
    lp_return: MoneyAmount
    lp_multiple: float
    total_multiple: float


class BreakEvenPoint(Model):
    """First swept exit value at which a tier receives proceeds."""

    tier_name: str
    exit_value: MoneyAmount


class SensitivityAnalysis(Model):
    scenario_id: str
    min_exit_value: MoneyAmount
    max_exit_value: MoneyAmount
    step: Decimal
    data_points: List[SensitivityDataPoint] = Field(default_factory=list)
    break_even_points: List[BreakEvenPoint] = Field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Data points as a DataFrame indexed by exit value."""
        df = pd.DataFrame([p.model_dump() for p in self.data_points])
        if df.empty:
            return df
        return df.set_index("exit_value")


def run_sensitivity(
    scenario: WaterfallScenario,
    min_exit_value: Decimal,
    max_exit_value: Decimal,
    steps: int = 20,
    settings: Optional[EngineSettings] = None,
) -> SensitivityAnalysis:
    """
    Evaluate ``scenario`` at ``steps + 1`` evenly spaced exit values.

    Args:
        scenario: Base scenario; only its exit value varies
        min_exit_value: First exit value of the sweep
        max_exit_value: Last exit value of the sweep
        steps: Number of intervals between the two
        settings: Engine settings

    Returns:
        SensitivityAnalysis with one data point per exit value and the
        break-even exit value of each tier activated during the sweep

    Raises:
        InvalidInputError: Non-positive steps or an inverted / negative range
        EngineError: If any point fails to evaluate

    Example:
        ```python
        analysis = run_sensitivity(scenario, 40_000_000, 120_000_000, steps=8)
        df = analysis.to_dataframe()
        for point in analysis.break_even_points:
            print(point.tier_name, point.exit_value)
        ```
    """
    settings = settings or EngineSettings()
    places = settings.precision.currency_decimal_places
    low = to_money(Decimal(min_exit_value), places)
    high = to_money(Decimal(max_exit_value), places)

    if steps < 1:
        raise InvalidInputError(f"steps must be at least 1, got {steps}")
    if low < 0 or high < low:
        raise InvalidInputError(
            f"Invalid exit value range [{min_exit_value}, {max_exit_value}]"
        )

    step = (high - low) / steps
    data_points: List[SensitivityDataPoint] = []
    break_even_points: List[BreakEvenPoint] = []
    activated: Set[int] = set()

    for i in range(steps + 1):
        exit_value = high if i == steps else to_money(low + step * i, places)
        result = evaluate_scenario(scenario.with_exit_value(exit_value), settings)

        lp_results = [r for r in result.investor_class_results if r.kind is InvestorKindEnum.LP]
        lp_return = sum((r.returned for r in lp_results), ZERO)
        lp_multiple = (
            sum(r.multiple for r in lp_results) / len(lp_results) if lp_results else 0.0
        )

        data_points.append(
            SensitivityDataPoint(
                exit_value=exit_value,
                gp_carry=result.gp_total,
                gp_carry_percentage=result.gp_carry_percentage,
                lp_return=lp_return,
                lp_multiple=lp_multiple,
                total_multiple=FinancialCalculations.calculate_multiple(
                    exit_value, result.total_invested
                ),
            )
        )

        for index, tier in enumerate(result.tier_breakdown):
            if tier.total_amount > 0 and index not in activated:
                activated.add(index)
                if i > 0:
                    break_even_points.append(
                        BreakEvenPoint(tier_name=tier.tier_name, exit_value=exit_value)
                    )

    logger.info(
        f"Sensitivity for '{scenario.id}': {len(data_points)} points, "
        f"{len(break_even_points)} break-even points"
    )

    return SensitivityAnalysis(
        scenario_id=scenario.id,
        min_exit_value=low,
        max_exit_value=high,
        step=step,
        data_points=data_points,
        break_even_points=break_even_points,
    )


__all__ = [
    "BreakEvenPoint",
    "SensitivityAnalysis",
    "SensitivityDataPoint",
    "run_sensitivity",
]
