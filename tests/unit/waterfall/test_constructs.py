# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from decimal import Decimal

import pytest

from carryflow.core.primitives import InvestorKindEnum
from carryflow.waterfall import (
    catch_up_amount,
    create_fund_from_commitments,
    create_simple_fund,
    create_standard_waterfall,
)
from tests.conftest import money


def test_standard_waterfall_bounds():
    tiers = create_standard_waterfall(40_000_000, 10, 3)

    assert [t.tier_end for t in tiers] == [
        money("40000000"), money("52000000"), money("55000000"), None,
    ]
    assert [t.name for t in tiers] == [
        "Return of Capital", "Preferred Return", "GP Catch-Up", "Carried Interest",
    ]
    assert tiers[2].gp_share_percent == 100
    assert tiers[3].gp_share_percent == 20


def test_standard_waterfall_compounding():
    tiers = create_standard_waterfall(40_000_000, 10, 3, compounding=True)

    # 40M * (1.1 ** 3 - 1) = 13.24M preferred, 3.31M catch-up
    assert tiers[1].tier_end == money("53240000")
    assert tiers[2].tier_end == money("56550000")


def test_standard_waterfall_partial_catch_up():
    tiers = create_standard_waterfall(40_000_000, 10, 3, catchup_percentage=50)

    # 0.2 * 12M / (0.5 - 0.2) = 8M
    assert tiers[2].tier_end == money("60000000")
    assert tiers[2].lp_share_percent == 50


def test_standard_waterfall_rejects_negative_capital():
    with pytest.raises(ValueError):
        create_standard_waterfall(-1, 10, 3)


class TestCatchUpAmount:
    def test_full_catch_up(self):
        assert catch_up_amount(Decimal("12000000"), Decimal(20), Decimal(100)) == money("3000000")

    def test_cap_limits_width(self):
        width = catch_up_amount(
            Decimal("12000000"), Decimal(20), Decimal(100), catchup_cap=Decimal("1000000")
        )

        assert width == money("1000000")

    def test_catch_up_share_not_above_carry(self):
        """The catch-up can never complete, so only a cap gives it width."""
        assert catch_up_amount(Decimal("12000000"), Decimal(20), Decimal(20)) == 0
        assert catch_up_amount(
            Decimal("12000000"), Decimal(20), Decimal(10), catchup_cap=Decimal("5000000")
        ) == money("5000000")

    def test_gp_already_paid_in_preferred_tier(self):
        """An 80/20 preferred tier already gives the GP its carry share."""
        width = catch_up_amount(
            Decimal("12000000"), Decimal(20), Decimal(100), preferred_return_lp_share=Decimal(80)
        )

        assert width == 0


class TestFundBuilders:
    def test_simple_fund(self):
        lp, gp = create_simple_fund(lp_commitment=Decimal("40000000"))

        assert (lp.id, lp.kind, lp.contributed) == ("lp", InvestorKindEnum.LP, money("40000000"))
        assert (gp.id, gp.kind, gp.commitment) == ("gp", InvestorKindEnum.GP, 0)

    def test_fund_from_commitments(self):
        classes = create_fund_from_commitments(
            [("Class A", Decimal("30000000")), ("Class B", Decimal("10000000"))]
        )

        assert [c.id for c in classes] == ["lp-1", "lp-2", "gp"]
        assert classes[0].ownership_percentage == 75
        assert classes[1].ownership_percentage == 25
        assert classes[2].kind is InvestorKindEnum.GP

    def test_fund_from_commitments_requires_capital(self):
        with pytest.raises(ValueError):
            create_fund_from_commitments([])
        with pytest.raises(ValueError):
            create_fund_from_commitments([("Empty", Decimal(0))])
