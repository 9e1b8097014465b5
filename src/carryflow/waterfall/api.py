# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Waterfall Analysis API

Public entry points for evaluating scenarios, comparing several scenarios and
allocating class results to limited partners. Every entry point takes an
optional `EngineSettings`; omitted settings fall back to the defaults.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from ..core.errors import InvalidInputError
from ..core.primitives import EngineSettings
from .orchestrator import ScenarioOrchestrator
from .results import ComparisonRow, ScenarioComparison, WaterfallResult
from .scenario import WaterfallScenario

logger = logging.getLogger(__name__)


def evaluate_scenario(
    scenario: WaterfallScenario,
    settings: Optional[EngineSettings] = None,
    include_lp_detail: bool = False,
) -> WaterfallResult:
    """
    Evaluate one waterfall scenario.

    Args:
        scenario: Scenario to evaluate
        settings: Engine settings (defaults when omitted)
        include_lp_detail: Also allocate LP class results to each limited partner

    Returns:
        WaterfallResult with tier breakdown, class results and metrics

    Raises:
        EngineError: Any engine failure; ``error.stage`` names the stage reached

    Example:
        ```python
        from carryflow.waterfall import evaluate_scenario

        result = evaluate_scenario(scenario)
        print(f"GP carry: {result.gp_total} ({result.gp_carry_percentage:.1f}%)")
        for tier in result.tier_breakdown:
            print(tier.tier_name, tier.total_amount, tier.cumulative_amount)
        ```
    """
    orchestrator = ScenarioOrchestrator(
        scenario=scenario,
        settings=settings or EngineSettings(),
        include_lp_detail=include_lp_detail,
    )
    return orchestrator.run()


def compare_scenarios(
    scenarios: Sequence[WaterfallScenario],
    settings: Optional[EngineSettings] = None,
) -> ScenarioComparison:
    """
    Evaluate several independent scenarios.

    Scenarios share nothing, so each result is exactly what
    `evaluate_scenario` returns for it alone. The first failing scenario
    aborts the comparison.

    Raises:
        InvalidInputError: If two scenarios share an id
        EngineError: If any scenario fails to evaluate
    """
    ids = [s.id for s in scenarios]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise InvalidInputError(f"Duplicate scenario ids: {', '.join(duplicates)}")

    settings = settings or EngineSettings()
    results: Dict[str, WaterfallResult] = {}
    rows = []
    for scenario in scenarios:
        result = evaluate_scenario(scenario, settings)
        results[scenario.id] = result
        rows.append(
            ComparisonRow(
                scenario_id=scenario.id,
                scenario_name=scenario.name,
                model=scenario.model,
                exit_value=result.exit_value,
                gp_carry=result.gp_total,
                gp_carry_percentage=result.gp_carry_percentage,
                lp_return=result.lp_total,
                total_multiple=result.metrics.moic,
                irr=result.metrics.irr,
            )
        )

    logger.info(f"Compared {len(scenarios)} scenarios")
    return ScenarioComparison(results=results, comparison_metrics=rows)


__all__ = ["compare_scenarios", "evaluate_scenario"]
