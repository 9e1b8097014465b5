# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the Carry Accrual Tracker

Reference position: 40M contributed on 2021-01-01, 60M distributed on
2024-01-01 (exactly 3.0 years), 8% compounding hurdle, 20% carry, full
catch-up. The preferred return is 40M * (1.08 ** 3 - 1) = 10,388,480 and the
catch-up 2,597,120, so the GP accrues exactly 20% of the 20M profit.
"""

from datetime import date
from decimal import Decimal

import pytest

from carryflow.core import (
    CarryOverdistributedError,
    InvalidInputError,
    NoCapitalInvestedError,
)
from carryflow.core.primitives import AccelerationTriggerEnum
from carryflow.waterfall import (
    CarriedInterestTerm,
    CarryAccrualTracker,
    CliffVesting,
    GradedVesting,
    accrue_carry,
    build_carry_tiers,
)
from carryflow.waterfall.carry import months_between
from tests.conftest import carry_payment, contribution, distribution, money

START = date(2021, 1, 1)
AS_OF = date(2024, 1, 1)


@pytest.fixture
def flows():
    return [
        contribution(START, Decimal("40000000")),
        distribution(AS_OF, Decimal("60000000")),
    ]


class TestCarryAccrual:
    """Tests for CarryAccrualTracker.accrue."""

    def test_reference_position(self, flows):
        accrual = accrue_carry(CarriedInterestTerm(), flows, AS_OF)

        assert accrual.lp_preferred_return == money("10388480.00")
        assert accrual.lp_preferred_return_paid == money("10388480.00")
        assert accrual.catchup_amount == money("2597120.00")
        assert accrual.catchup_paid == money("2597120.00")
        assert accrual.accrued_carry == money("4000000.00")
        assert accrual.vested_carry == money("4000000.00")
        assert accrual.remaining_carry == money("4000000.00")
        assert accrual.moic == pytest.approx(1.5)
        assert accrual.irr == pytest.approx(1.5 ** (1 / 3) - 1, abs=1e-6)

    def test_simple_hurdle(self, flows):
        accrual = accrue_carry(CarriedInterestTerm(compounding=False), flows, AS_OF)

        assert accrual.lp_preferred_return == money("9600000.00")

    def test_below_hurdle_accrues_nothing(self):
        flows = [contribution(START, Decimal("40000000")), distribution(AS_OF, Decimal("45000000"))]

        accrual = accrue_carry(CarriedInterestTerm(), flows, AS_OF)

        assert accrual.accrued_carry == 0
        assert accrual.lp_preferred_return_paid == money("5000000")
        assert accrual.catchup_paid == 0

    def test_unrealized_value_counts_as_proceeds(self):
        flows = [contribution(START, Decimal("40000000")), distribution(AS_OF, Decimal("20000000"))]

        accrual = accrue_carry(
            CarriedInterestTerm(), flows, AS_OF, unrealized_value=Decimal("40000000")
        )

        assert accrual.accrued_carry == money("4000000.00")
        assert accrual.total_value == money("60000000")

    @pytest.mark.parametrize(
        "distributed, unrealized, realized_gains, unrealized_gains",
        [
            ("60000000", "0", "20000000", "0"),
            ("50000000", "10000000", "10000000", "10000000"),
            ("20000000", "40000000", "0", "20000000"),
            ("10000000", "20000000", "0", "-10000000"),
        ],
    )
    def test_gains_split_realized_first(
        self, distributed, unrealized, realized_gains, unrealized_gains
    ):
        flows = [contribution(START, Decimal("40000000")), distribution(AS_OF, Decimal(distributed))]

        accrual = accrue_carry(
            CarriedInterestTerm(), flows, AS_OF, unrealized_value=Decimal(unrealized)
        )

        assert accrual.realized_gains == money(realized_gains)
        assert accrual.unrealized_gains == money(unrealized_gains)

    def test_flows_after_as_of_are_ignored(self, flows):
        later = flows + [
            distribution(date(2025, 1, 1), Decimal("100000000")),
            carry_payment(date(2025, 1, 1), Decimal("50000000")),
        ]

        assert accrue_carry(CarriedInterestTerm(), later, AS_OF) == accrue_carry(
            CarriedInterestTerm(), flows, AS_OF
        )

    def test_carry_paid_reduces_remaining(self, flows):
        paid = flows + [carry_payment(date(2023, 6, 1), Decimal("1500000"))]

        accrual = accrue_carry(CarriedInterestTerm(), paid, AS_OF)

        assert accrual.distributed_carry == money("1500000")
        assert accrual.remaining_carry == money("2500000.00")

    def test_overdistributed_carry(self, flows):
        paid = flows + [carry_payment(date(2023, 6, 1), Decimal("5000000"))]

        with pytest.raises(CarryOverdistributedError):
            accrue_carry(CarriedInterestTerm(), paid, AS_OF)

    def test_no_contributions_before_as_of(self):
        flows = [contribution(date(2025, 1, 1), Decimal("40000000"))]

        with pytest.raises(NoCapitalInvestedError):
            accrue_carry(CarriedInterestTerm(), flows, AS_OF)

    def test_negative_unrealized_value(self, flows):
        with pytest.raises(InvalidInputError):
            accrue_carry(CarriedInterestTerm(), flows, AS_OF, unrealized_value=Decimal(-1))

    def test_irr_unavailable_before_any_distribution(self):
        flows = [contribution(START, Decimal("40000000"))]

        accrual = accrue_carry(CarriedInterestTerm(), flows, AS_OF)

        assert accrual.irr is None
        assert accrual.irr_unavailable_reason.value == "no_sign_change"
        assert accrual.accrued_carry == 0


class TestCarryVesting:
    def test_graded_vesting(self, flows):
        term = CarriedInterestTerm(
            vesting_schedule=GradedVesting(vesting_period_months=48, cliff_months=12)
        )

        accrual = CarryAccrualTracker().accrue(term, flows, AS_OF)

        # 36 of 48 months elapsed since the first contribution
        assert accrual.vested_fraction == 0.75
        assert accrual.vested_carry == money("3000000.00")
        assert accrual.unvested_carry == money("1000000.00")

    def test_effective_date_starts_the_clock(self, flows):
        term = CarriedInterestTerm(
            vesting_schedule=GradedVesting(vesting_period_months=48),
            effective_date=date(2022, 1, 1),
        )

        accrual = accrue_carry(term, flows, AS_OF)

        assert accrual.vested_fraction == 0.5

    def test_acceleration_on_exit(self, flows):
        term = CarriedInterestTerm(
            vesting_schedule=CliffVesting(
                cliff_months=120, acceleration_triggers=[AccelerationTriggerEnum.EXIT]
            )
        )

        before = accrue_carry(term, flows, AS_OF)
        after = accrue_carry(term, flows, AS_OF, events=[AccelerationTriggerEnum.EXIT])

        assert before.vested_carry == 0
        assert after.vested_carry == after.accrued_carry


def test_months_between():
    assert months_between(date(2021, 1, 15), date(2022, 3, 20)) == 14
    assert months_between(date(2021, 1, 15), date(2021, 2, 14)) == 0
    assert months_between(date(2022, 1, 1), date(2021, 1, 1)) == 0


@pytest.mark.parametrize(
    "end, expected",
    [
        (date(2021, 2, 27), 0),
        (date(2021, 2, 28), 1),
        (date(2021, 3, 30), 1),
        (date(2021, 3, 31), 2),
    ],
)
def test_months_between_clamps_to_month_end(end, expected):
    assert months_between(date(2021, 1, 31), end) == expected


def test_build_carry_tiers():
    tiers = build_carry_tiers(
        CarriedInterestTerm(preferred_return=Decimal(90)),
        Decimal("40000000"),
        Decimal("10000000"),
    )

    assert tiers[1].lp_share_percent == 90
    assert tiers[1].tier_end == money("50000000")
    # (0.2 - 0.1) * 10M / (1.0 - 0.2) = 1.25M of catch-up remains
    assert tiers[2].tier_end == money("51250000")
