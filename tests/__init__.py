# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Carryflow test suite.

Unit tests per component under ``unit/`` and end-to-end scenario runs under
``integration/``.
"""
