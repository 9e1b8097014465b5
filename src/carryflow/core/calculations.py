# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Financial calculation functions.

Contains static methods for core financial metrics. These functions are pure
(math-only) and independent of scenario structure; other modules should
delegate to these to ensure a single source of truth for financial
calculations.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

import pandas as pd

from .errors import NoSignChangeError
from .primitives.settings import DayCountConvention, SolverSettings
from .solver import solve_rate


class FinancialCalculations:
    """
    Pure mathematical functions for financial calculations.

    Static methods for core financial metrics, independent of waterfall
    structure or business logic.
    """

    @staticmethod
    def year_fraction(
        start: date,
        end: date,
        day_count: DayCountConvention = DayCountConvention.ACTUAL_365,
    ) -> float:
        """Elapsed time between two dates in years under ``day_count``."""
        return (end - start).days / day_count.days_per_year

    @staticmethod
    def net_cash_flows(flows: Iterable[Tuple[date, float]]) -> pd.Series:
        """
        Merge signed (date, amount) pairs into a date-sorted series.

        Flows sharing a date are netted into a single entry.

        Example:
            ```python
            series = FinancialCalculations.net_cash_flows([
                (date(2024, 1, 1), -100.0),
                (date(2024, 1, 1), 20.0),
                (date(2025, 1, 1), 110.0),
            ])
            # 2024-01-01   -80.0
            # 2025-01-01   110.0
            ```
        """
        pairs = list(flows)
        if not pairs:
            return pd.Series(dtype=float)
        dates, amounts = zip(*pairs)
        series = pd.Series(
            [float(a) for a in amounts], index=pd.DatetimeIndex(pd.to_datetime(list(dates)))
        )
        return series.groupby(level=0).sum().sort_index()

    @staticmethod
    def calculate_irr(
        cash_flows: pd.Series,
        settings: Optional[SolverSettings] = None,
        day_count: DayCountConvention = DayCountConvention.ACTUAL_365,
    ) -> float:
        """
        Calculate the annualized Internal Rate of Return of a dated series.

        Args:
            cash_flows: Series of signed cash flows with a DatetimeIndex
                       Negative values = contributions/outflows
                       Positive values = distributions/inflows
            settings: Root-finder configuration
            day_count: Convention used to convert dates to year fractions

        Returns:
            IRR as decimal (e.g., 0.15 for 15%)

        Raises:
            NoSignChangeError: Empty series or flows that never change sign
            DidNotConvergeError: Root-finder failed within its bounds

        Example:
            ```python
            flows = pd.Series(
                [-10_000_000.0, 15_000_000.0],
                index=pd.to_datetime(["2021-01-01", "2024-01-01"]),
            )
            irr = FinancialCalculations.calculate_irr(flows)
            print(f"IRR: {irr:.2%}")  # IRR: 14.47%
            ```
        """
        if cash_flows.empty:
            raise NoSignChangeError("No cash flows to compute an IRR from")

        series = cash_flows.sort_index()
        elapsed_days = (series.index - series.index[0]).days.to_numpy()
        times = elapsed_days / day_count.days_per_year
        return solve_rate(times, series.to_numpy(dtype=float), settings)

    @staticmethod
    def calculate_multiple(total_returned: Decimal, total_invested: Decimal) -> float:
        """
        Return multiple on invested capital; 0.0 when nothing was invested.
        """
        if total_invested <= 0:
            return 0.0
        return float(total_returned / total_invested)

    @staticmethod
    def growth_factor(rate: Decimal, years: Decimal, compounding: bool = True) -> Decimal:
        """
        Growth factor for ``rate`` (decimal, e.g. 0.08) over ``years``.

        Compound growth is ``(1 + rate) ** years``; simple growth is
        ``1 + rate * years``.
        """
        if compounding:
            return (Decimal(1) + rate) ** years
        return Decimal(1) + rate * years


__all__ = ["FinancialCalculations"]
