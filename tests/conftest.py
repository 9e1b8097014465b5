# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for Carryflow testing.

Most tests revolve around one reference fund: 40M invested, a 10% simple
hurdle over 3 years, 20% carry with a full catch-up. Its standard waterfall
has bounds 40M / 52M / 55M / unbounded, so a 100M exit pays the GP exactly
12M (3M catch-up plus 20% of the 45M residual).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional

import pytest

from carryflow.core import EngineSettings
from carryflow.waterfall import (
    CashFlow,
    InvestorClass,
    WaterfallScenario,
    create_simple_fund,
    create_standard_waterfall,
)

FUND_SIZE = Decimal("40000000")
INVESTMENT_DATE = date(2021, 1, 1)
EXIT_DATE = date(2024, 1, 1)


# Tier Utilities
def standard_tiers(
    total_invested: Decimal = FUND_SIZE,
    hurdle_rate: Decimal = Decimal(10),
    holding_period_years: Decimal = Decimal(3),
    **kwargs,
):
    """Reference four-tier waterfall (40M / 52M / 55M / unbounded by default)."""
    return create_standard_waterfall(
        total_invested, hurdle_rate, holding_period_years, **kwargs
    )


# Scenario Utilities
def create_test_scenario(
    exit_value: Decimal = Decimal("100000000"),
    investor_classes: Optional[List[InvestorClass]] = None,
    scenario_id: str = "base",
    **overrides,
) -> WaterfallScenario:
    """
    Create a scenario around the reference fund.

    Args:
        exit_value: Proceeds to distribute
        investor_classes: Defaults to one fully-called 40M LP class and a GP class
        scenario_id: Scenario identifier
        **overrides: Any other WaterfallScenario field

    Example:
        >>> scenario = create_test_scenario(exit_value=Decimal("50000000"))
        >>> scenario.exit_value
        Decimal('50000000')
    """
    fields = {
        "id": scenario_id,
        "name": f"Scenario {scenario_id}",
        "exit_value": exit_value,
        "tiers": standard_tiers(),
        "investor_classes": (
            investor_classes
            if investor_classes is not None
            else create_simple_fund(lp_commitment=FUND_SIZE)
        ),
    }
    fields.update(overrides)
    return WaterfallScenario(**fields)


def create_dated_scenario(**overrides) -> WaterfallScenario:
    """Reference scenario held from 2021-01-01 to 2024-01-01 (exactly 3.0 years at Actual/365)."""
    overrides.setdefault("investment_date", INVESTMENT_DATE)
    overrides.setdefault("exit_date", EXIT_DATE)
    return create_test_scenario(**overrides)


# Cash Flow Utilities
def contribution(on: date, amount) -> CashFlow:
    return CashFlow(date=on, amount=amount, flow_type="contribution")


def distribution(on: date, amount) -> CashFlow:
    return CashFlow(date=on, amount=amount, flow_type="distribution")


def carry_payment(on: date, amount) -> CashFlow:
    return CashFlow(date=on, amount=amount, flow_type="carry_payment")


def money(value: str) -> Decimal:
    return Decimal(value)


# Fixtures
@pytest.fixture
def settings():
    """Default engine settings."""
    return EngineSettings()


@pytest.fixture
def tiers():
    """Reference standard waterfall."""
    return standard_tiers()


@pytest.fixture
def base_scenario():
    """Undated 100M exit of the reference fund."""
    return create_test_scenario()


@pytest.fixture
def dated_scenario():
    """Dated 100M exit of the reference fund."""
    return create_dated_scenario()
