# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
Carryflow - Fund Waterfall and Carried Interest Engine

Allocates exit and distribution proceeds across ordered waterfall tiers,
tracks GP carried interest accrual and vesting, and computes fund
performance metrics (IRR, MOIC, DPI, TVPI, RVPI).

Key Entry Points:
- carryflow.waterfall.evaluate_scenario() - Full scenario evaluation
- carryflow.waterfall.accrue_carry() - Carry position at a date
- carryflow.waterfall.compare_scenarios() - Several scenarios side by side
- carryflow.reporting.* - DataFrame summaries of results

Example Usage:
    ```python
    from carryflow.waterfall import (
        WaterfallScenario,
        create_simple_fund,
        create_standard_waterfall,
        evaluate_scenario,
    )

    scenario = WaterfallScenario(
        id="base",
        name="Base Case",
        exit_value=100_000_000,
        tiers=create_standard_waterfall(40_000_000, hurdle_rate=10, holding_period_years=3),
        investor_classes=create_simple_fund(lp_commitment=40_000_000),
    )
    result = evaluate_scenario(scenario)
    print(f"GP carry: {result.gp_total}")
    ```
"""

# Libraries should not configure logging; applications attach their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "core",
    "reporting",
    "waterfall",
]


_LAZY_MODULES = {
    "core": "carryflow.core",
    "reporting": "carryflow.reporting",
    "waterfall": "carryflow.waterfall",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'carryflow' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
