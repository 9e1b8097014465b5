# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Performance Metrics Calculator

Fund-level multiples and IRR from dated contributions, distributions and a
terminal NAV:

- ``moic = (distributions + nav) / contributions``
- ``dpi = distributions / contributions``
- ``rvpi = nav / contributions``
- ``tvpi = dpi + rvpi``

IRR failures (no sign change, no convergence) do not fail the calculation:
the IRR is reported as unavailable with a reason and the multiples are still
returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Tuple

import pandas as pd

from ..core.calculations import FinancialCalculations
from ..core.errors import (
    InvalidInputError,
    IRRUnavailableError,
    NoCapitalInvestedError,
)
from ..core.money import ZERO, to_money
from ..core.primitives import EngineSettings, IRRUnavailableReason
from .entities import CashFlow
from .results import FundMetrics

logger = logging.getLogger(__name__)

IRROutcome = Tuple[Optional[float], Optional[IRRUnavailableReason]]


@dataclass
class PerformanceMetricsCalculator:
    """
    Computes IRR, MOIC, DPI, TVPI and RVPI.

    Attributes:
        settings: Engine settings (solver, precision, day count)
    """

    settings: EngineSettings = field(default_factory=EngineSettings)

    def metrics(
        self,
        contributions: Sequence[CashFlow],
        distributions: Sequence[CashFlow],
        current_nav: Decimal = ZERO,
        nav_date: Optional[date] = None,
    ) -> FundMetrics:
        """
        Calculate fund metrics.

        Args:
            contributions: Capital paid in (amounts are positive magnitudes)
            distributions: Proceeds paid out
            current_nav: Unrealized value still held
            nav_date: Date the NAV is valued at; defaults to the latest flow date

        Returns:
            FundMetrics with ``irr=None`` and a reason when no IRR exists

        Raises:
            NoCapitalInvestedError: If contributions sum to zero
        """
        summary = self.summary_metrics(
            sum((cf.amount for cf in contributions), ZERO),
            sum((cf.amount for cf in distributions), ZERO),
            current_nav,
        )
        series = self.build_series(contributions, distributions, summary.current_nav, nav_date)
        irr, reason = self.irr_outcome(series)
        return summary.model_copy(update={"irr": irr, "irr_unavailable_reason": reason})

    def summary_metrics(
        self,
        total_contributions: Decimal,
        total_distributions: Decimal,
        current_nav: Decimal = ZERO,
    ) -> FundMetrics:
        """
        Multiples from undated totals.

        The IRR is reported unavailable (``NO_DATED_CASH_FLOWS``) since no
        timing is known.

        Raises:
            InvalidInputError: Negative totals
            NoCapitalInvestedError: If contributions sum to zero
        """
        places = self.settings.precision.currency_decimal_places
        contributed = to_money(Decimal(total_contributions), places)
        distributed = to_money(Decimal(total_distributions), places)
        nav = to_money(Decimal(current_nav), places)

        if contributed < 0 or distributed < 0 or nav < 0:
            raise InvalidInputError("Contributions, distributions and NAV must be non-negative")
        if contributed == 0:
            raise NoCapitalInvestedError(
                "Contributions sum to zero; multiples are undefined"
            )

        dpi = float(distributed / contributed)
        rvpi = float(nav / contributed)
        moic = float((distributed + nav) / contributed)

        return FundMetrics(
            irr=None,
            irr_unavailable_reason=IRRUnavailableReason.NO_DATED_CASH_FLOWS,
            moic=moic,
            dpi=dpi,
            tvpi=dpi + rvpi,
            rvpi=rvpi,
            total_contributions=contributed,
            total_distributions=distributed,
            current_nav=nav,
        )

    @staticmethod
    def build_series(
        contributions: Iterable[CashFlow],
        distributions: Iterable[CashFlow],
        current_nav: Decimal = ZERO,
        nav_date: Optional[date] = None,
    ) -> pd.Series:
        """
        Merge flows into one signed, date-sorted series.

        Contributions are negative; distributions and the terminal NAV are
        positive. Flows sharing a date are netted.
        """
        signed = [(cf.date, -float(cf.amount)) for cf in contributions]
        signed += [(cf.date, float(cf.amount)) for cf in distributions]
        if current_nav > 0:
            terminal = nav_date or max((d for d, _ in signed), default=None)
            if terminal is not None:
                signed.append((terminal, float(current_nav)))
        return FinancialCalculations.net_cash_flows(signed)

    def irr_outcome(self, series: pd.Series) -> IRROutcome:
        """IRR of a signed series, or ``(None, reason)`` when it cannot be computed."""
        if series.empty:
            return None, IRRUnavailableReason.NO_DATED_CASH_FLOWS
        try:
            irr = FinancialCalculations.calculate_irr(
                series, settings=self.settings.solver, day_count=self.settings.day_count
            )
        except IRRUnavailableError as e:
            logger.warning(f"IRR unavailable ({e.reason.value}): {e.message}")
            return None, e.reason
        return irr, None


__all__ = ["PerformanceMetricsCalculator"]
