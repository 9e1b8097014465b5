# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the IRR root-finder.

Reference values are cross-checked against pyxirr, which uses the same
Actual/365 convention as the default engine settings.
"""

from datetime import date

import numpy as np
import pytest
import pyxirr

from carryflow.core import (
    DidNotConvergeError,
    InvalidInputError,
    IRRUnavailableError,
    NoSignChangeError,
    SolverSettings,
    npv,
    solve_rate,
)
from carryflow.core.primitives import IRRUnavailableReason


class TestSolveRate:
    """Tests for solve_rate."""

    def test_two_flow_closed_form(self):
        """-10M then +15M three years later is 1.5 ** (1/3) - 1."""
        rate = solve_rate([0.0, 3.0], [-10_000_000, 15_000_000])

        assert rate == pytest.approx(1.5 ** (1 / 3) - 1, abs=1e-9)
        assert rate == pytest.approx(0.1447, abs=1e-4)

    def test_matches_pyxirr_on_irregular_flows(self):
        """Irregularly dated flows agree with an independent XIRR implementation."""
        dates = [date(2021, 1, 1), date(2021, 7, 15), date(2022, 3, 1), date(2024, 6, 30)]
        amounts = [-1000.0, -500.0, 300.0, 1800.0]
        times = [(d - dates[0]).days / 365.0 for d in dates]

        rate = solve_rate(times, amounts)

        assert rate == pytest.approx(pyxirr.xirr(dates, amounts), abs=1e-6)

    def test_negative_rate(self):
        """Losing half the money in a year is -50%."""
        assert solve_rate([0.0, 1.0], [-100.0, 50.0]) == pytest.approx(-0.5, abs=1e-9)

    def test_root_found_by_expanding_bracket(self):
        """A 999x one-year return lies above the default upper bound of 10."""
        rate = solve_rate([0.0, 1.0], [-1.0, 1000.0])

        assert rate == pytest.approx(999.0, rel=1e-6)

    def test_npv_is_zero_at_solution(self):
        times = [0.0, 0.5, 2.0, 4.25]
        amounts = [-250.0, -100.0, 80.0, 400.0]

        rate = solve_rate(times, amounts)

        assert npv(rate, np.array(times), np.array(amounts)) == pytest.approx(0.0, abs=1e-6)

    def test_scale_does_not_change_rate(self):
        """The objective is normalized, so scaling every flow leaves the rate unchanged."""
        small = solve_rate([0.0, 2.0], [-1.0, 1.3])
        large = solve_rate([0.0, 2.0], [-1e9, 1.3e9])

        assert small == pytest.approx(large, abs=1e-9)


class TestSolveRateFailures:
    """Tests for the failure modes of solve_rate."""

    @pytest.mark.parametrize(
        "amounts",
        [
            [100.0, 50.0],
            [-100.0, -50.0],
            [0.0, 0.0],
        ],
    )
    def test_no_sign_change(self, amounts):
        with pytest.raises(NoSignChangeError) as exc_info:
            solve_rate([0.0, 1.0], amounts)

        assert exc_info.value.reason is IRRUnavailableReason.NO_SIGN_CHANGE
        assert isinstance(exc_info.value, IRRUnavailableError)

    def test_iteration_bound_reports_non_convergence(self):
        settings = SolverSettings(max_iterations=1)

        with pytest.raises(DidNotConvergeError) as exc_info:
            solve_rate([0.0, 3.0], [-10_000_000, 15_000_000], settings)

        assert exc_info.value.reason is IRRUnavailableReason.DID_NOT_CONVERGE

    def test_unbracketable_root_reports_non_convergence(self):
        """Without room to expand the bracket a 999x return cannot be found."""
        settings = SolverSettings(max_bracket_expansions=0)

        with pytest.raises(DidNotConvergeError):
            solve_rate([0.0, 1.0], [-1.0, 1000.0], settings)

    def test_mismatched_lengths(self):
        with pytest.raises(InvalidInputError):
            solve_rate([0.0, 1.0, 2.0], [-1.0, 2.0])

    def test_empty_series(self):
        with pytest.raises(InvalidInputError):
            solve_rate([], [])

    def test_non_finite_amount(self):
        with pytest.raises(InvalidInputError):
            solve_rate([0.0, 1.0], [-1.0, float("inf")])
