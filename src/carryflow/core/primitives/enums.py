# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum


class EvaluationStage(str, Enum):
    """
    Stages of a single scenario evaluation, in execution order.

    Each transition is a pure function call. An error raised while moving into
    a stage is tagged with that stage so callers know how far the run got.
    """

    VALIDATED = "Validated"
    TIERS_EVALUATED = "TiersEvaluated"
    CARRY_ACCRUED = "CarryAccrued"
    METRICS_COMPUTED = "MetricsComputed"
    LPS_ALLOCATED = "LPsAllocated"
    DONE = "Done"


class TierTypeEnum(str, Enum):
    """
    Kinds of waterfall tiers.

    Attributes:
        RETURN_OF_CAPITAL: Contributed capital paid back first (normally 100% LP)
        PREFERRED_RETURN: LP hurdle on contributed capital (normally 100% LP)
        GP_CATCH_UP: GP-heavy tier until the GP reaches its carry share of profits
        RESIDUAL_SPLIT: Everything above, split at the carry ratio (e.g., 80/20)
    """

    RETURN_OF_CAPITAL = "return_of_capital"
    PREFERRED_RETURN = "preferred_return"
    GP_CATCH_UP = "gp_catch_up"
    RESIDUAL_SPLIT = "residual_split"


class WaterfallModelEnum(str, Enum):
    """
    Waterfall shapes supported by the scenario orchestrator.

    EUROPEAN: whole-fund waterfall, catch-up included, invested basis = commitments
    AMERICAN: deal-by-deal approximation, catch-up skipped, basis = capital called
    BLENDED: weighted combination of the two
    """

    EUROPEAN = "european"
    AMERICAN = "american"
    BLENDED = "blended"


class InvestorKindEnum(str, Enum):
    """Side of the waterfall an investor class sits on."""

    LP = "LP"
    GP = "GP"


class CashFlowTypeEnum(str, Enum):
    """
    Classification of fund-level cash flows.

    Amounts are always recorded as non-negative magnitudes; the type decides
    the sign when a series is assembled for IRR.

    Attributes:
        CONTRIBUTION: Capital called from investors
        DISTRIBUTION: Gross proceeds paid out by the fund
        CARRY_PAYMENT: Portion of distributions already paid to the GP as carry
    """

    CONTRIBUTION = "contribution"
    DISTRIBUTION = "distribution"
    CARRY_PAYMENT = "carry_payment"


class VestingKindEnum(str, Enum):
    """Carry vesting schedule variants."""

    IMMEDIATE = "immediate"
    CLIFF = "cliff"
    GRADED = "graded"


class AccelerationTriggerEnum(str, Enum):
    """Events that fully vest outstanding carry when a schedule lists them."""

    EXIT = "exit"
    IPO = "ipo"
    CHANGE_OF_CONTROL = "change_of_control"


class IRRUnavailableReason(str, Enum):
    """Why an IRR could not be reported. Consumers render "not computable"."""

    NO_SIGN_CHANGE = "no_sign_change"
    DID_NOT_CONVERGE = "did_not_converge"
    NO_DATED_CASH_FLOWS = "no_dated_cash_flows"


class ClawbackStatusEnum(str, Enum):
    CLEAR = "clear"
    AT_RISK = "at_risk"
    TRIGGERED = "triggered"


class LookbackStatusEnum(str, Enum):
    CLEARED = "cleared"
    MONITOR = "monitor"
    AT_RISK = "at_risk"
