# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carryflow Core Primitives

Building blocks shared by every engine component: the immutable model base,
enums, constrained types and engine settings.
"""

from .enums import (
    AccelerationTriggerEnum,
    CashFlowTypeEnum,
    ClawbackStatusEnum,
    EvaluationStage,
    InvestorKindEnum,
    IRRUnavailableReason,
    LookbackStatusEnum,
    TierTypeEnum,
    VestingKindEnum,
    WaterfallModelEnum,
)
from .model import Model
from .settings import (
    DayCountConvention,
    EngineSettings,
    PrecisionSettings,
    SolverSettings,
)
from .types import (
    FloatBetween0And1,
    MoneyAmount,
    Percentage,
    PositiveInt,
    PositiveIntGe1,
    Rate,
)

__all__ = [
    # Core models
    "Model",
    # Settings
    "EngineSettings",
    "SolverSettings",
    "PrecisionSettings",
    "DayCountConvention",
    # Enums
    "AccelerationTriggerEnum",
    "CashFlowTypeEnum",
    "ClawbackStatusEnum",
    "EvaluationStage",
    "InvestorKindEnum",
    "IRRUnavailableReason",
    "LookbackStatusEnum",
    "TierTypeEnum",
    "VestingKindEnum",
    "WaterfallModelEnum",
    # Types
    "FloatBetween0And1",
    "MoneyAmount",
    "Percentage",
    "PositiveInt",
    "PositiveIntGe1",
    "Rate",
]
