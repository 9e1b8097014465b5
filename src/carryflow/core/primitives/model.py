# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable value records: engine inputs are never mutated once a calculation
    starts, and results are plain serializable data with no behavior beyond
    derived (computed) fields.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,  # Immutable models; intermediate state lives in local objects
        extra="forbid",  # Catches typos and missing field definitions immediately
    )
