# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carryflow Waterfall Models
Public API for the carryflow.waterfall subpackage.

This module contains the fund waterfall domain: tiers, investor classes,
carried-interest terms, the components that evaluate them and the public
entry points that orchestrate a full scenario evaluation.
"""

from .allocator import allocate_to_lps
from .api import compare_scenarios, evaluate_scenario
from .carry import CarryAccrualTracker, accrue_carry, build_carry_tiers
from .constructs import (
    catch_up_amount,
    create_fund_from_commitments,
    create_simple_fund,
    create_standard_waterfall,
)
from .entities import CashFlow, InvestorClass, LimitedPartner
from .metrics import PerformanceMetricsCalculator
from .orchestrator import EvaluationContext, ScenarioOrchestrator
from .provisions import summarize_clawback, summarize_lookback
from .results import (
    CarryAccrual,
    ClawbackSummary,
    ComparisonRow,
    FundMetrics,
    InvestorClassResult,
    LookbackSummary,
    LPAllocation,
    ScenarioComparison,
    TierBreakdownResult,
    WaterfallResult,
)
from .scenario import (
    BlendWeights,
    ClawbackProvision,
    LookbackProvision,
    WaterfallScenario,
)
from .sensitivity import (
    BreakEvenPoint,
    SensitivityAnalysis,
    SensitivityDataPoint,
    run_sensitivity,
)
from .tier_evaluator import TierEvaluator, resolve_tier_bounds
from .tiers import (
    CarriedInterestTerm,
    CatchUpTier,
    CliffVesting,
    GradedVesting,
    ImmediateVesting,
    PreferredReturnTier,
    ResidualSplitTier,
    ReturnOfCapitalTier,
    TierDefinition,
    VestingSchedule,
)

__all__ = [
    # Analysis API
    "evaluate_scenario",
    "compare_scenarios",
    "accrue_carry",
    "allocate_to_lps",
    "run_sensitivity",
    # Components
    "ScenarioOrchestrator",
    "EvaluationContext",
    "TierEvaluator",
    "CarryAccrualTracker",
    "PerformanceMetricsCalculator",
    "resolve_tier_bounds",
    "build_carry_tiers",
    "summarize_clawback",
    "summarize_lookback",
    # Inputs
    "WaterfallScenario",
    "InvestorClass",
    "LimitedPartner",
    "CashFlow",
    "BlendWeights",
    "ClawbackProvision",
    "LookbackProvision",
    # Tiers and terms
    "TierDefinition",
    "ReturnOfCapitalTier",
    "PreferredReturnTier",
    "CatchUpTier",
    "ResidualSplitTier",
    "CarriedInterestTerm",
    "VestingSchedule",
    "ImmediateVesting",
    "CliffVesting",
    "GradedVesting",
    # Results
    "WaterfallResult",
    "TierBreakdownResult",
    "InvestorClassResult",
    "LPAllocation",
    "FundMetrics",
    "CarryAccrual",
    "ClawbackSummary",
    "LookbackSummary",
    "ScenarioComparison",
    "ComparisonRow",
    "SensitivityAnalysis",
    "SensitivityDataPoint",
    "BreakEvenPoint",
    # Constructs
    "create_standard_waterfall",
    "create_simple_fund",
    "create_fund_from_commitments",
    "catch_up_amount",
]
