# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the DataFrame summaries of waterfall results.
"""

from decimal import Decimal

import pytest

from carryflow.reporting import (
    create_comparison_dataframe,
    create_investor_class_summary_dataframe,
    create_lp_allocation_dataframe,
    create_tier_breakdown_dataframe,
)
from carryflow.waterfall import (
    InvestorClass,
    LimitedPartner,
    compare_scenarios,
    evaluate_scenario,
)
from tests.conftest import FUND_SIZE, create_dated_scenario, create_test_scenario


class TestTierBreakdownDataFrame:
    def test_rows_and_total(self, base_scenario):
        df = create_tier_breakdown_dataframe(evaluate_scenario(base_scenario))

        assert list(df["Tier"]) == [
            "Return of Capital", "Preferred Return", "GP Catch-Up", "Carried Interest", "TOTAL",
        ]
        total = df.iloc[-1]
        assert total["GP"] == 12_000_000.0
        assert total["LP"] == 88_000_000.0
        assert total["% of Proceeds"] == 1.0
        assert df["Total"].iloc[:-1].sum() == pytest.approx(100_000_000.0)

    def test_formatted(self, base_scenario):
        df = create_tier_breakdown_dataframe(evaluate_scenario(base_scenario), formatted=True)

        assert df.iloc[-1]["GP"] == "$12,000,000"
        assert df.iloc[0]["% of Proceeds"] == "40.0%"


class TestInvestorClassDataFrame:
    def test_numeric(self, dated_scenario):
        df = create_investor_class_summary_dataframe(evaluate_scenario(dated_scenario))

        assert list(df["Investor Class"]) == ["Limited Partners", "General Partner"]
        assert df.iloc[0]["Multiple"] == pytest.approx(2.2)
        assert df.iloc[1]["Carry"] == 12_000_000.0

    def test_formatted_unavailable_irr(self, base_scenario):
        df = create_investor_class_summary_dataframe(
            evaluate_scenario(base_scenario), formatted=True
        )

        assert list(df["IRR"]) == ["N/A", "N/A"]
        assert df.iloc[0]["Multiple"] == "2.20x"
        assert df.iloc[0]["Returned"] == "$88,000,000"


def test_lp_allocation_dataframe():
    classes = [
        InvestorClass(
            id="lp", name="LPs", kind="LP", commitment=FUND_SIZE,
            limited_partners=[
                LimitedPartner(id="a", name="Pension", ownership_percentage=75),
                LimitedPartner(id="b", name="Family Office", ownership_percentage=25),
            ],
        ),
        InvestorClass(id="gp", name="GP", kind="GP"),
    ]
    result = evaluate_scenario(
        create_test_scenario(investor_classes=classes), include_lp_detail=True
    )

    df = create_lp_allocation_dataframe(result)

    assert list(df["Limited Partner"]) == ["Pension", "Family Office"]
    assert list(df["Returned"]) == [66_000_000.0, 22_000_000.0]
    assert create_lp_allocation_dataframe(evaluate_scenario(create_test_scenario())).empty


def test_comparison_dataframe():
    comparison = compare_scenarios([
        create_dated_scenario(scenario_id="base"),
        create_dated_scenario(scenario_id="downside", exit_value=Decimal("50000000")),
    ])

    df = create_comparison_dataframe(comparison)

    assert list(df.index) == ["base", "downside"]
    assert df.loc["base", "gp_carry"] == 12_000_000.0
    assert df.loc["downside", "total_multiple"] == pytest.approx(1.25)
