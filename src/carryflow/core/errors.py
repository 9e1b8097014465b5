# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Engine error taxonomy.

Every failure the engine can report derives from `EngineError`, itself a
`ValueError` so callers that already guard model construction with
``except ValueError`` keep working. Errors raised inside a scenario evaluation
carry the `EvaluationStage` that was being entered when they occurred.

Propagation:
- Input and accounting errors abort the whole call; no partial result is built.
- `IRRUnavailableError` subclasses are recovered by the metrics calculator,
  which reports the IRR as unavailable and still returns the other metrics.
"""

from __future__ import annotations

from typing import Optional

from .primitives.enums import EvaluationStage, IRRUnavailableReason


class EngineError(ValueError):
    """Base class for all engine failures."""

    def __init__(self, message: str, stage: Optional[EvaluationStage] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage is not None:
            return f"[{self.stage.value}] {self.message}"
        return self.message


class InvalidInputError(EngineError):
    """Malformed tier configuration, negative amounts or inconsistent scenario data."""


class IRRUnavailableError(EngineError):
    """An internal rate of return cannot be determined for the series."""

    reason: IRRUnavailableReason


class NoSignChangeError(IRRUnavailableError):
    """Cash flows never change sign, so no rate can bracket a root."""

    reason = IRRUnavailableReason.NO_SIGN_CHANGE


class DidNotConvergeError(IRRUnavailableError):
    """The root-finder hit its iteration bound or could not bracket a root."""

    reason = IRRUnavailableReason.DID_NOT_CONVERGE


class NoCapitalInvestedError(EngineError):
    """Contributions sum to zero; MOIC/DPI/TVPI/RVPI have no denominator."""


class NoOwnershipDataError(EngineError):
    """Ownership percentages sum to zero, so amounts cannot be pro-rated."""


class CarryOverdistributedError(EngineError):
    """More carry has been paid out than has accrued (upstream data inconsistency)."""


class ConservationError(EngineError):
    """An allocation failed to conserve the amount it was asked to distribute."""


__all__ = [
    "EngineError",
    "InvalidInputError",
    "IRRUnavailableError",
    "NoSignChangeError",
    "DidNotConvergeError",
    "NoCapitalInvestedError",
    "NoOwnershipDataError",
    "CarryOverdistributedError",
    "ConservationError",
]
