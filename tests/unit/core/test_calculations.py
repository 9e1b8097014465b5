# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for FinancialCalculations.
"""

from datetime import date
from decimal import Decimal

import pandas as pd
import pytest
import pyxirr

from carryflow.core import FinancialCalculations, NoSignChangeError
from carryflow.core.primitives import DayCountConvention


class TestYearFraction:
    def test_actual_365(self):
        assert FinancialCalculations.year_fraction(date(2021, 1, 1), date(2024, 1, 1)) == 3.0

    def test_actual_365_25(self):
        result = FinancialCalculations.year_fraction(
            date(2021, 1, 1), date(2024, 1, 1), DayCountConvention.ACTUAL_365_25
        )

        assert result == pytest.approx(1095 / 365.25)


class TestNetCashFlows:
    def test_same_date_flows_are_netted_and_sorted(self):
        series = FinancialCalculations.net_cash_flows([
            (date(2025, 1, 1), 110.0),
            (date(2024, 1, 1), -100.0),
            (date(2024, 1, 1), 20.0),
        ])

        assert list(series.values) == [-80.0, 110.0]
        assert list(series.index) == [pd.Timestamp("2024-01-01"), pd.Timestamp("2025-01-01")]

    def test_empty_input(self):
        assert FinancialCalculations.net_cash_flows([]).empty


class TestCalculateIRR:
    def test_three_year_exit(self):
        flows = pd.Series(
            [-10_000_000.0, 15_000_000.0],
            index=pd.to_datetime(["2021-01-01", "2024-01-01"]),
        )

        assert FinancialCalculations.calculate_irr(flows) == pytest.approx(0.1447, abs=1e-4)

    def test_unsorted_series_matches_pyxirr(self):
        """Input order does not matter; the series is sorted by date."""
        dates = [date(2022, 6, 30), date(2020, 3, 15), date(2021, 9, 1)]
        amounts = [2500.0, -2000.0, 150.0]
        flows = pd.Series(amounts, index=pd.to_datetime(dates))

        expected = pyxirr.xirr(dates, amounts)

        assert FinancialCalculations.calculate_irr(flows) == pytest.approx(expected, abs=1e-6)

    def test_empty_series_has_no_sign_change(self):
        with pytest.raises(NoSignChangeError):
            FinancialCalculations.calculate_irr(pd.Series(dtype=float))


class TestMultiplesAndGrowth:
    def test_multiple(self):
        assert FinancialCalculations.calculate_multiple(Decimal(150), Decimal(100)) == 1.5

    def test_multiple_with_nothing_invested(self):
        assert FinancialCalculations.calculate_multiple(Decimal(150), Decimal(0)) == 0.0

    def test_simple_growth(self):
        factor = FinancialCalculations.growth_factor(Decimal("0.10"), Decimal(3), compounding=False)

        assert factor == Decimal("1.3")

    def test_compound_growth(self):
        factor = FinancialCalculations.growth_factor(Decimal("0.10"), Decimal(3))

        assert factor == Decimal("1.331")
