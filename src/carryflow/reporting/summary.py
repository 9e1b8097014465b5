# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tabular summaries of waterfall results.

Each function turns a result model into a pandas DataFrame for display or
export by an external renderer. ``formatted=True`` produces display strings
("$1,000,000", "12.5%", "1.50x"); the default keeps numeric columns.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd

from ..waterfall.results import ScenarioComparison, WaterfallResult


def _money(value) -> str:
    return f"${float(value):,.0f}"


def _percent(value: Optional[float]) -> str:
    return f"{value:.1%}" if value is not None else "N/A"


def create_tier_breakdown_dataframe(
    result: WaterfallResult, formatted: bool = False
) -> pd.DataFrame:
    """
    One row per tier with its bounds, amounts and share of proceeds.

    Args:
        result: Evaluated scenario
        formatted: Render amounts and percentages as display strings

    Returns:
        DataFrame with a TOTAL row appended
    """
    rows = [
        {
            "Tier": tier.tier_name,
            "Type": tier.tier_type.value,
            "Start": float(tier.tier_start),
            "End": float(tier.tier_end) if tier.tier_end is not None else None,
            "Total": float(tier.total_amount),
            "LP": float(tier.lp_amount),
            "GP": float(tier.gp_amount),
            "Cumulative": float(tier.cumulative_amount),
            "% of Proceeds": tier.percentage_of_proceeds / 100,
        }
        for tier in result.tier_breakdown
    ]
    rows.append({
        "Tier": "TOTAL",
        "Type": "ALL",
        "Start": None,
        "End": None,
        "Total": float(result.lp_total + result.gp_total),
        "LP": float(result.lp_total),
        "GP": float(result.gp_total),
        "Cumulative": float(result.exit_value),
        "% of Proceeds": 1.0 if result.exit_value > 0 else 0.0,
    })
    df = pd.DataFrame(rows)

    if formatted:
        for column in ["Total", "LP", "GP", "Cumulative"]:
            df[column] = df[column].map(_money)
        df["% of Proceeds"] = df["% of Proceeds"].map(_percent)
    return df


def create_investor_class_summary_dataframe(
    result: WaterfallResult, formatted: bool = False
) -> pd.DataFrame:
    """
    Create a summary DataFrame showing investor class returns and metrics.

    IRR is None (or "N/A" when formatted) where it could not be computed.
    """
    rows = [
        {
            "Investor Class": r.investor_class_name,
            "Type": r.kind.value,
            "Invested": float(r.invested),
            "Returned": float(r.returned),
            "Net Return": float(r.net_return),
            "Carry": float(r.carry),
            "Multiple": r.multiple,
            "IRR": r.irr,
        }
        for r in result.investor_class_results
    ]
    df = pd.DataFrame(rows)

    if formatted and not df.empty:
        for column in ["Invested", "Returned", "Net Return", "Carry"]:
            df[column] = df[column].map(_money)
        df["Multiple"] = df["Multiple"].map(lambda m: f"{m:.2f}x")
        df["IRR"] = [_percent(r.irr) for r in result.investor_class_results]
    return df


def create_lp_allocation_dataframe(result: WaterfallResult) -> pd.DataFrame:
    """Per-LP drill-down across all classes (empty when LP detail was not requested)."""
    rows = [
        {
            "Investor Class": class_id,
            "Limited Partner": allocation.name,
            "Ownership %": float(allocation.ownership_percentage),
            "Share": allocation.normalized_share,
            "Invested": float(allocation.invested),
            "Returned": float(allocation.returned),
            "Net Return": float(allocation.net_return),
            "Multiple": allocation.multiple,
        }
        for class_id, allocations in result.lp_allocations.items()
        for allocation in allocations
    ]
    return pd.DataFrame(rows)


def create_comparison_dataframe(comparison: ScenarioComparison) -> pd.DataFrame:
    """Headline metrics of each compared scenario, indexed by scenario id."""
    df = pd.DataFrame([row.model_dump(mode="json") for row in comparison.comparison_metrics])
    if df.empty:
        return df
    for column in ["exit_value", "gp_carry", "lp_return"]:
        df[column] = df[column].astype(float)
    return df.set_index("scenario_id")


__all__ = [
    "create_comparison_dataframe",
    "create_investor_class_summary_dataframe",
    "create_lp_allocation_dataframe",
    "create_tier_breakdown_dataframe",
]
