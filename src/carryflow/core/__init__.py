# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carryflow Core Framework

Foundational building blocks shared by the waterfall engine: immutable model
primitives, settings, money arithmetic, the error taxonomy and the IRR
root-finder.
"""

from . import primitives
from .calculations import FinancialCalculations
from .errors import (
    CarryOverdistributedError,
    ConservationError,
    DidNotConvergeError,
    EngineError,
    InvalidInputError,
    IRRUnavailableError,
    NoCapitalInvestedError,
    NoOwnershipDataError,
    NoSignChangeError,
)
from .money import allocate_pro_rata, split_amount, to_money
from .primitives import (
    DayCountConvention,
    EngineSettings,
    Model,
    PrecisionSettings,
    SolverSettings,
)
from .solver import npv, solve_rate

__all__ = [
    # Modules
    "primitives",
    # Calculations
    "FinancialCalculations",
    "npv",
    "solve_rate",
    # Money
    "allocate_pro_rata",
    "split_amount",
    "to_money",
    # Settings
    "DayCountConvention",
    "EngineSettings",
    "Model",
    "PrecisionSettings",
    "SolverSettings",
    # Errors
    "CarryOverdistributedError",
    "ConservationError",
    "DidNotConvergeError",
    "EngineError",
    "InvalidInputError",
    "IRRUnavailableError",
    "NoCapitalInvestedError",
    "NoOwnershipDataError",
    "NoSignChangeError",
]
