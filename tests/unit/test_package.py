# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest

import carryflow


def test_subpackages_load_lazily():
    assert carryflow.waterfall.evaluate_scenario is not None
    assert carryflow.core.FinancialCalculations is not None
    assert carryflow.reporting.create_tier_breakdown_dataframe is not None


def test_unknown_attribute():
    with pytest.raises(AttributeError):
        carryflow.not_a_module


def test_library_logger_has_null_handler():
    handlers = logging.getLogger("carryflow").handlers

    assert any(isinstance(h, logging.NullHandler) for h in handlers)
