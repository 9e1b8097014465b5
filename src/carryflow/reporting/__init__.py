# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carryflow Reporting Module

DataFrame summaries of waterfall results for external renderers:

    result = evaluate_scenario(scenario, include_lp_detail=True)
    tiers = create_tier_breakdown_dataframe(result, formatted=True)
    classes = create_investor_class_summary_dataframe(result)
"""

from .summary import (
    create_comparison_dataframe,
    create_investor_class_summary_dataframe,
    create_lp_allocation_dataframe,
    create_tier_breakdown_dataframe,
)

__all__ = [
    "create_comparison_dataframe",
    "create_investor_class_summary_dataframe",
    "create_lp_allocation_dataframe",
    "create_tier_breakdown_dataframe",
]
