# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Scenario Orchestrator

This module provides the ScenarioOrchestrator service that runs one waterfall
scenario end to end by delegating to the specialist components.

The orchestrator moves through a fixed sequence of stages:
1. **Validated** - Scenario consistency (tiers, classes, dates, model options)
2. **TiersEvaluated** - Proceeds walked through the tiers for the selected
   model and mapped onto investor classes
3. **CarryAccrued** - Carry position from the carry term, when one is set
4. **MetricsComputed** - Fund metrics and per-class IRR
5. **LPsAllocated** - Per-LP drill-down, when requested
6. **Done** - Clawback / lookback summaries and result assembly

Any engine error aborts the run, is tagged with the stage being entered, is
logged and re-raised. No partial result is ever returned.

Example:
    ```python
    orchestrator = ScenarioOrchestrator(scenario, settings, include_lp_detail=True)
    result = orchestrator.run()
    print(f"GP total: {result.gp_total}, fund IRR: {result.metrics.irr}")
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_DOWN, Decimal
from typing import Dict, List, Optional, Sequence

from ..core.errors import EngineError, InvalidInputError, NoOwnershipDataError
from ..core.money import ZERO, allocate_pro_rata, to_money
from ..core.primitives import (
    AccelerationTriggerEnum,
    CashFlowTypeEnum,
    EngineSettings,
    EvaluationStage,
    InvestorKindEnum,
    IRRUnavailableReason,
    PrecisionSettings,
    TierTypeEnum,
    WaterfallModelEnum,
)
from .allocator import allocate_to_lps
from .carry import CarryAccrualTracker
from .entities import CashFlow, InvestorClass
from .metrics import PerformanceMetricsCalculator
from .provisions import summarize_clawback, summarize_lookback
from .results import (
    CarryAccrual,
    FundMetrics,
    InvestorClassResult,
    LPAllocation,
    TierBreakdownResult,
    WaterfallResult,
)
from .scenario import BlendWeights, WaterfallScenario
from .tier_evaluator import TierEvaluator, check_conservation, resolve_tier_bounds
from .tiers import BaseTier

logger = logging.getLogger(__name__)

CONTRIBUTION = CashFlowTypeEnum.CONTRIBUTION
DISTRIBUTION = CashFlowTypeEnum.DISTRIBUTION


@dataclass
class EvaluationContext:
    """
    Mutable working state of one scenario evaluation.

    Lives only for the duration of `ScenarioOrchestrator.run`; the scenario
    and the returned result are both immutable.
    """

    invested: Dict[str, Decimal] = field(default_factory=dict)
    returned: Dict[str, Decimal] = field(default_factory=dict)
    carry: Dict[str, Decimal] = field(default_factory=dict)
    tier_breakdown: List[TierBreakdownResult] = field(default_factory=list)
    unallocated_gp_amount: Decimal = ZERO
    carry_accrual: Optional[CarryAccrual] = None
    metrics: Optional[FundMetrics] = None
    class_results: List[InvestorClassResult] = field(default_factory=list)
    lp_allocations: Dict[str, List[LPAllocation]] = field(default_factory=dict)

    @property
    def total_invested(self) -> Decimal:
        return sum(self.invested.values(), ZERO)


def collapse_catch_up_tiers(
    tiers: Sequence[BaseTier], settings: Optional[PrecisionSettings] = None
) -> List[BaseTier]:
    """
    Remove the width of every catch-up tier, shifting later bounds down.

    Catch-up tiers stay in the list with zero width so the breakdown keeps one
    entry per tier.
    """
    bounds = resolve_tier_bounds(tiers, settings)
    removed = ZERO
    collapsed: List[BaseTier] = []
    for tier, (start, end) in zip(tiers, bounds):
        new_start = start - removed
        if tier.kind is TierTypeEnum.GP_CATCH_UP and end is not None:
            removed += end - start
            new_end = new_start
        else:
            new_end = None if end is None else end - removed
        collapsed.append(
            tier.model_copy(update={"tier_start": new_start, "tier_end": new_end})
        )
    return collapsed


@dataclass
class ScenarioOrchestrator:
    """
    Runs a single scenario through every evaluation stage.

    Attributes:
        scenario: The scenario to evaluate
        settings: Engine settings
        include_lp_detail: Allocate LP class results to individual limited partners
    """

    scenario: WaterfallScenario
    settings: EngineSettings = field(default_factory=EngineSettings)
    include_lp_detail: bool = False

    @property
    def places(self) -> int:
        return self.settings.precision.currency_decimal_places

    def run(self) -> WaterfallResult:
        """
        Evaluate the scenario.

        Returns:
            WaterfallResult for the scenario

        Raises:
            EngineError: Any engine failure, with ``stage`` set to the stage
                that was being entered
        """
        context = EvaluationContext()
        stage = EvaluationStage.VALIDATED
        try:
            self._validate()

            stage = EvaluationStage.TIERS_EVALUATED
            self._evaluate_tiers(context)

            stage = EvaluationStage.CARRY_ACCRUED
            self._accrue_carry(context)

            stage = EvaluationStage.METRICS_COMPUTED
            self._compute_metrics(context)

            stage = EvaluationStage.LPS_ALLOCATED
            self._allocate_lps(context)

            stage = EvaluationStage.DONE
            result = self._assemble(context)
        except EngineError as e:
            e.stage = stage
            logger.error(
                f"Scenario '{self.scenario.id}' failed at stage {stage.value}: {e.message}"
            )
            raise

        logger.info(
            f"Scenario '{self.scenario.id}' evaluated ({self.scenario.model.value}): "
            f"LP {result.lp_total}, GP {result.gp_total}"
        )
        return result

    # --- Validated -----------------------------------------------------------

    def _validate(self) -> None:
        scenario = self.scenario

        if scenario.exit_value < 0:
            raise InvalidInputError(f"Exit value must be non-negative, got {scenario.exit_value}")
        # Raises InvalidInputError for amounts beyond minor-unit precision
        to_money(scenario.exit_value, self.places)

        ids = [ic.id for ic in scenario.investor_classes]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise InvalidInputError(f"Duplicate investor class ids: {', '.join(duplicates)}")

        lp_ids = {ic.id for ic in scenario.lp_classes}
        for tier in scenario.tiers:
            if tier.allocation_target is not None and tier.allocation_target not in lp_ids:
                raise InvalidInputError(
                    f"Tier '{tier.name}' targets '{tier.allocation_target}', "
                    "which is not an LP investor class"
                )

        resolve_tier_bounds(scenario.tiers, self.settings.precision)

        if (scenario.investment_date is None) != (scenario.exit_date is None):
            raise InvalidInputError("investment_date and exit_date must be given together")
        if scenario.has_dates and scenario.exit_date < scenario.investment_date:
            raise InvalidInputError(
                f"exit_date {scenario.exit_date} precedes investment_date {scenario.investment_date}"
            )
        if scenario.carry_term is not None and not scenario.has_dates:
            raise InvalidInputError("A carry term requires investment_date and exit_date")
        if scenario.blend is not None and scenario.model is not WaterfallModelEnum.BLENDED:
            raise InvalidInputError("Blend weights only apply to the blended model")

        logger.debug(f"Scenario '{scenario.id}' validated")

    # --- TiersEvaluated ------------------------------------------------------

    def _evaluate_tiers(self, context: EvaluationContext) -> None:
        scenario = self.scenario
        model = scenario.model

        if model is WaterfallModelEnum.EUROPEAN:
            context.tier_breakdown = self._run_european()
            context.invested = self._commitment_basis()
        elif model is WaterfallModelEnum.AMERICAN:
            context.tier_breakdown = self._run_american()
            context.invested = self._contributed_basis()
        else:
            weights = scenario.blend or BlendWeights()
            european_weight, american_weight = weights.normalized
            context.tier_breakdown = self._blend_breakdowns(
                self._run_european(), self._run_american(), european_weight, american_weight
            )
            context.invested = self._blend_invested(
                self._commitment_basis(), self._contributed_basis(),
                european_weight, american_weight,
            )

        self._map_to_classes(context)
        logger.info(
            f"Scenario '{scenario.id}': {scenario.exit_value} allocated across "
            f"{len(context.tier_breakdown)} tiers"
        )

    def _run_european(self) -> List[TierBreakdownResult]:
        evaluator = TierEvaluator(self.settings.precision)
        return evaluator.evaluate(self.scenario.tiers, self.scenario.exit_value)

    def _run_american(self) -> List[TierBreakdownResult]:
        evaluator = TierEvaluator(self.settings.precision)
        tiers = collapse_catch_up_tiers(self.scenario.tiers, self.settings.precision)
        return evaluator.evaluate(tiers, self.scenario.exit_value)

    def _commitment_basis(self) -> Dict[str, Decimal]:
        return {ic.id: to_money(ic.commitment, self.places) for ic in self.scenario.investor_classes}

    def _contributed_basis(self) -> Dict[str, Decimal]:
        classes = self.scenario.investor_classes
        if sum((ic.contributed for ic in classes), ZERO) == 0:
            return self._commitment_basis()
        return {ic.id: to_money(ic.contributed, self.places) for ic in classes}

    def _blend_invested(
        self,
        european: Dict[str, Decimal],
        american: Dict[str, Decimal],
        european_weight: Decimal,
        american_weight: Decimal,
    ) -> Dict[str, Decimal]:
        return {
            key: to_money(
                european[key] * european_weight + american[key] * american_weight,
                self.places,
            )
            for key in european
        }

    def _blend_breakdowns(
        self,
        european: List[TierBreakdownResult],
        american: List[TierBreakdownResult],
        european_weight: Decimal,
        american_weight: Decimal,
    ) -> List[TierBreakdownResult]:
        """
        Weighted combination of two breakdowns of the same tiers.

        Totals are re-rounded to minor units; any cent lost to rounding is put
        back on the largest tier so the blend still sums to the proceeds.
        """
        proceeds = to_money(self.scenario.exit_value, self.places)

        totals = []
        gp_amounts = []
        for e, a in zip(european, american):
            totals.append(
                to_money(
                    e.total_amount * european_weight + a.total_amount * american_weight,
                    self.places,
                )
            )
            gp_amounts.append(
                to_money(
                    e.gp_amount * european_weight + a.gp_amount * american_weight,
                    self.places,
                    rounding=ROUND_DOWN,
                )
            )

        difference = proceeds - sum(totals, ZERO)
        if difference != 0:
            largest = max(range(len(totals)), key=lambda i: (totals[i], -i))
            totals[largest] += difference
            gp_amounts[largest] = min(gp_amounts[largest], totals[largest])

        blended: List[TierBreakdownResult] = []
        cumulative = ZERO
        for e, total, gp in zip(european, totals, gp_amounts):
            gp = min(gp, total)
            cumulative += total
            blended.append(
                e.model_copy(
                    update={
                        "total_amount": total,
                        "cumulative_amount": cumulative,
                        "lp_amount": total - gp,
                        "gp_amount": gp,
                    }
                )
            )

        check_conservation(blended, proceeds)
        return blended

    def _map_to_classes(self, context: EvaluationContext) -> None:
        """Credit each tier's LP and GP sides to investor classes."""
        scenario = self.scenario
        lp_classes = scenario.lp_classes
        gp_classes = scenario.gp_classes

        context.returned = {ic.id: ZERO for ic in scenario.investor_classes}
        context.carry = {ic.id: ZERO for ic in scenario.investor_classes}

        for tier, result in zip(scenario.tiers, context.tier_breakdown):
            if result.lp_amount > 0:
                if tier.allocation_target is not None:
                    context.returned[tier.allocation_target] += result.lp_amount
                else:
                    self._credit_pro_rata(context, lp_classes, result.lp_amount, is_carry=False)

            if result.gp_amount > 0:
                gp_weight = sum((ic.ownership_percentage for ic in gp_classes), ZERO)
                if gp_weight > 0:
                    self._credit_pro_rata(context, gp_classes, result.gp_amount, is_carry=True)
                else:
                    context.unallocated_gp_amount += result.gp_amount

        if context.unallocated_gp_amount > 0:
            logger.warning(
                f"Scenario '{scenario.id}': {context.unallocated_gp_amount} of GP proceeds "
                "has no GP investor class to receive it"
            )

    def _credit_pro_rata(
        self,
        context: EvaluationContext,
        classes: List[InvestorClass],
        amount: Decimal,
        is_carry: bool,
    ) -> None:
        if not classes:
            raise NoOwnershipDataError(
                f"{amount} must be allocated but the scenario has no LP investor classes"
            )
        shares = allocate_pro_rata(amount, [ic.ownership_percentage for ic in classes], self.places)
        for ic, share in zip(classes, shares):
            context.returned[ic.id] += share
            if is_carry:
                context.carry[ic.id] += share

    # --- CarryAccrued --------------------------------------------------------

    def _accrue_carry(self, context: EvaluationContext) -> None:
        scenario = self.scenario
        if scenario.carry_term is None:
            return

        flows = [
            CashFlow(
                date=scenario.investment_date,
                amount=context.total_invested,
                flow_type=CashFlowTypeEnum.CONTRIBUTION,
            ),
            CashFlow(
                date=scenario.exit_date,
                amount=scenario.exit_value,
                flow_type=CashFlowTypeEnum.DISTRIBUTION,
            ),
        ]
        context.carry_accrual = CarryAccrualTracker(self.settings).accrue(
            scenario.carry_term,
            flows,
            as_of_date=scenario.exit_date,
            events=(AccelerationTriggerEnum.EXIT,),
        )

    # --- MetricsComputed -----------------------------------------------------

    def _compute_metrics(self, context: EvaluationContext) -> None:
        scenario = self.scenario
        calculator = PerformanceMetricsCalculator(self.settings)

        if scenario.has_dates:
            context.metrics = calculator.metrics(
                [self._flow(scenario.investment_date, context.total_invested, CONTRIBUTION)],
                [self._flow(scenario.exit_date, scenario.exit_value, DISTRIBUTION)],
            )
        else:
            context.metrics = calculator.summary_metrics(context.total_invested, scenario.exit_value)

        for ic in scenario.investor_classes:
            invested = context.invested[ic.id]
            returned = context.returned[ic.id]
            if scenario.has_dates:
                series = calculator.build_series(
                    [self._flow(scenario.investment_date, invested, CONTRIBUTION)],
                    [self._flow(scenario.exit_date, returned, DISTRIBUTION)],
                )
                irr, reason = calculator.irr_outcome(series)
            else:
                irr, reason = None, IRRUnavailableReason.NO_DATED_CASH_FLOWS

            context.class_results.append(
                InvestorClassResult(
                    investor_class_id=ic.id,
                    investor_class_name=ic.name,
                    kind=ic.kind,
                    invested=invested,
                    returned=returned,
                    carry=context.carry[ic.id],
                    irr=irr,
                    irr_unavailable_reason=reason,
                )
            )

    @staticmethod
    def _flow(on: date, amount: Decimal, flow_type: CashFlowTypeEnum) -> CashFlow:
        return CashFlow(date=on, amount=amount, flow_type=flow_type)

    # --- LPsAllocated --------------------------------------------------------

    def _allocate_lps(self, context: EvaluationContext) -> None:
        if not self.include_lp_detail:
            return
        rosters = {ic.id: ic.limited_partners for ic in self.scenario.investor_classes}
        for class_result in context.class_results:
            if class_result.kind is not InvestorKindEnum.LP:
                continue
            roster = rosters[class_result.investor_class_id]
            if not roster:
                logger.debug(
                    f"Investor class '{class_result.investor_class_id}' has no LP roster; skipping"
                )
                continue
            context.lp_allocations[class_result.investor_class_id] = allocate_to_lps(
                class_result, roster, self.settings.precision
            )

    # --- Done ----------------------------------------------------------------

    def _assemble(self, context: EvaluationContext) -> WaterfallResult:
        scenario = self.scenario
        lp_total = sum((t.lp_amount for t in context.tier_breakdown), ZERO)
        gp_total = sum((t.gp_amount for t in context.tier_breakdown), ZERO)

        clawback = None
        if scenario.clawback is not None:
            clawback = summarize_clawback(
                scenario.clawback, context.total_invested, lp_total, gp_total, self.places
            )
        lookback = None
        if scenario.lookback is not None:
            lookback = summarize_lookback(scenario.lookback, gp_total, self.places)

        return WaterfallResult(
            scenario_id=scenario.id,
            model=scenario.model,
            exit_value=to_money(scenario.exit_value, self.places),
            total_invested=context.total_invested,
            tier_breakdown=context.tier_breakdown,
            investor_class_results=context.class_results,
            metrics=context.metrics,
            carry=context.carry_accrual,
            lp_allocations=context.lp_allocations,
            clawback=clawback,
            lookback=lookback,
            unallocated_gp_amount=context.unallocated_gp_amount,
            gp_management_fees=to_money(scenario.management_fees, self.places),
        )


__all__ = [
    "EvaluationContext",
    "ScenarioOrchestrator",
    "collapse_catch_up_tiers",
]
