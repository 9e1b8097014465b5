# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Numeric root-finder for internal rate of return.

Finds the rate ``r`` for which ``sum(c_i / (1 + r) ** t_i) == 0`` over an
irregular cash flow series, with ``t_i`` expressed in fractional years from a
reference date. The solver has no domain knowledge: it only sees times and
signed amounts.

Method:
    1. Reject series without a sign change (no root can be bracketed).
    2. Bracket a root between the configured bounds, doubling the upper bound
       while the NPV keeps the same sign at both ends.
    3. Iterate Newton steps inside the bracket. Any step that leaves the
       bracket, or a zero / non-finite derivative, falls back to bisection.
       Every evaluation narrows the bracket, so the iteration always
       terminates within ``max_iterations``.

The objective is normalized by the largest absolute flow so the tolerance is
independent of fund size.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .errors import DidNotConvergeError, InvalidInputError, NoSignChangeError
from .primitives.settings import SolverSettings

logger = logging.getLogger(__name__)

# Relative bracket width at which bisection can make no further progress
_BRACKET_EPSILON = 4 * np.finfo(float).eps

_DEFAULT_SETTINGS = SolverSettings()


def npv(rate: float, times: np.ndarray, amounts: np.ndarray) -> float:
    """Net present value of ``amounts`` at ``times`` (years) for an annual ``rate``."""
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return float(np.sum(amounts * np.power(1.0 + rate, -times)))


def npv_derivative(rate: float, times: np.ndarray, amounts: np.ndarray) -> float:
    """First derivative of `npv` with respect to the rate."""
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        return float(np.sum(-times * amounts * np.power(1.0 + rate, -times - 1.0)))


def solve_rate(
    times: Sequence[float],
    amounts: Sequence[float],
    settings: Optional[SolverSettings] = None,
) -> float:
    """
    Solve for the internal rate of return of a dated cash flow series.

    Args:
        times: Year fractions from the reference date, one per amount
        amounts: Signed cash flows (negative = paid in, positive = paid out)
        settings: Solver tolerances and bounds; defaults when omitted

    Returns:
        Annualized rate as a decimal (0.1447 for 14.47%)

    Raises:
        InvalidInputError: Mismatched or empty inputs, non-finite values
        NoSignChangeError: All flows share one sign (or are zero)
        DidNotConvergeError: No bracket found, or tolerance not reached within
            the iteration bound

    Example:
        ```python
        rate = solve_rate([0.0, 3.0], [-10_000_000, 15_000_000])
        print(f"IRR: {rate:.2%}")  # IRR: 14.47%
        ```
    """
    settings = settings or _DEFAULT_SETTINGS

    t = np.asarray(times, dtype=float)
    c = np.asarray(amounts, dtype=float)
    if t.shape != c.shape or t.ndim != 1 or t.size == 0:
        raise InvalidInputError("times and amounts must be non-empty sequences of equal length")
    if not (np.all(np.isfinite(t)) and np.all(np.isfinite(c))):
        raise InvalidInputError("times and amounts must be finite")
    if not (np.any(c > 0) and np.any(c < 0)):
        raise NoSignChangeError("Cash flow series has no sign change; IRR is undefined")

    c = c / np.max(np.abs(c))

    lo, hi = settings.lower_bound, settings.upper_bound
    f_lo = npv(lo, t, c)
    # Very long horizons overflow near -100%; pull the lower bound in until finite
    shrink = 0
    while not np.isfinite(f_lo) and shrink < 60:
        lo = (lo + settings.initial_guess) / 2.0
        f_lo = npv(lo, t, c)
        shrink += 1

    f_hi = npv(hi, t, c)
    expansions = 0
    while np.isfinite(f_lo) and f_lo * f_hi > 0 and expansions < settings.max_bracket_expansions:
        hi *= 2.0
        f_hi = npv(hi, t, c)
        expansions += 1

    if not (np.isfinite(f_lo) and np.isfinite(f_hi)) or f_lo * f_hi > 0:
        raise DidNotConvergeError(
            f"Could not bracket an IRR between {lo:.4f} and {hi:.4f}"
        )
    if f_lo == 0:
        return lo
    if f_hi == 0:
        return hi

    x = settings.initial_guess if lo < settings.initial_guess < hi else 0.5 * (lo + hi)

    for iteration in range(1, settings.max_iterations + 1):
        fx = npv(x, t, c)
        if abs(fx) <= settings.tolerance:
            logger.debug(f"IRR converged to {x:.10f} after {iteration} iterations")
            return x

        if (fx < 0) == (f_lo < 0):
            lo, f_lo = x, fx
        else:
            hi, f_hi = x, fx

        dfx = npv_derivative(x, t, c)
        x_next = None
        if np.isfinite(dfx) and dfx != 0:
            candidate = x - fx / dfx
            if lo < candidate < hi:
                x_next = candidate
        if x_next is None:
            x_next = 0.5 * (lo + hi)
            logger.debug(f"Newton step rejected at iteration {iteration}; bisecting")

        if hi - lo <= _BRACKET_EPSILON * max(1.0, abs(x_next)):
            logger.debug(f"IRR bracket collapsed at {x_next:.10f}")
            return x_next
        x = x_next

    raise DidNotConvergeError(
        f"IRR did not converge within {settings.max_iterations} iterations "
        f"(tolerance {settings.tolerance:g})"
    )


__all__ = ["npv", "npv_derivative", "solve_rate"]
