# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum

from pydantic import Field, model_validator

from .model import Model
from .types import PositiveInt, PositiveIntGe1


class DayCountConvention(str, Enum):
    """Day count conventions for converting dates to fractional years."""

    ACTUAL_365 = "Actual/365"
    ACTUAL_365_25 = "Actual/365.25"

    @property
    def days_per_year(self) -> float:
        return 365.25 if self is DayCountConvention.ACTUAL_365_25 else 365.0


class SolverSettings(Model):
    """
    Configuration for the IRR root-finder.

    The solver brackets a root between ``lower_bound`` and ``upper_bound``
    (doubling the upper bound up to ``max_bracket_expansions`` times), then
    alternates Newton steps with bisection until the normalized objective
    is within ``tolerance``.

    Usage Examples:
        # Defaults: 1e-9 tolerance, 200 iterations
        solver = SolverSettings()

        # Looser solve for interactive sensitivity sweeps
        solver = SolverSettings(tolerance=1e-7, max_iterations=100)
    """

    tolerance: float = Field(
        default=1e-9,
        gt=0,
        description="Convergence threshold on |NPV| divided by the largest absolute flow.",
    )
    max_iterations: PositiveIntGe1 = Field(
        default=200,
        description="Iteration bound; exceeding it is reported as non-convergence.",
    )
    initial_guess: float = Field(
        default=0.10, description="Starting rate for the Newton iteration."
    )
    lower_bound: float = Field(
        default=-0.9999,
        gt=-1.0,
        description="Lowest rate searched; rates at or below -100% are undefined.",
    )
    upper_bound: float = Field(
        default=10.0, description="Initial upper end of the search bracket."
    )
    max_bracket_expansions: PositiveInt = Field(
        default=20,
        description="How many times the upper bound may double while searching for a sign change.",
    )

    @model_validator(mode="after")
    def check_bracket(self) -> "SolverSettings":
        if self.upper_bound <= self.lower_bound:
            raise ValueError("upper_bound must be greater than lower_bound")
        if not self.lower_bound < self.initial_guess < self.upper_bound:
            raise ValueError("initial_guess must lie inside the search bracket")
        return self


class PrecisionSettings(Model):
    """Rounding and tolerance settings for monetary results."""

    currency_decimal_places: PositiveInt = Field(
        default=2, le=8, description="Minor-unit precision for all monetary amounts."
    )
    percent_sum_tolerance: float = Field(
        default=1e-6,
        gt=0,
        description="Allowed deviation of lp + gp share percentages from 100.",
    )
    reconstruction_tolerance: float = Field(
        default=1e-6,
        gt=0,
        description="Relative tolerance when re-summing pro-rata LP allocations.",
    )


class EngineSettings(Model):
    """Engine-wide settings

    Passed explicitly to the public entry points; every call that omits it
    uses the defaults below. Settings are read-only and safe to share between
    concurrent evaluations.
    """

    solver: SolverSettings = Field(default_factory=SolverSettings)
    precision: PrecisionSettings = Field(default_factory=PrecisionSettings)
    day_count: DayCountConvention = Field(
        default=DayCountConvention.ACTUAL_365,
        description="Day count used to turn cash flow dates into year fractions.",
    )
