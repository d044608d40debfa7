"""Tests for the fee engine."""

import pytest

from stableswap.amm import (
    FeeSchedule,
    admin_share,
    apply_imbalance_fees,
    imbalance_fee_rate,
    swap_fee,
    validate_fees,
)
from stableswap.constants import ADMIN_ACTIONS_DELAY, MAX_ADMIN_FEE, MAX_FEE
from stableswap.errors import (
    AdminActionNotReadyError,
    AdminActionPendingError,
    InvalidParameterError,
)

ONE = 10**18
T0 = 1_700_000_000


class TestFeeArithmetic:
    """Tests for the fee primitives."""

    def test_swap_fee(self):
        """0.04% of 1e18."""
        assert swap_fee(ONE, 4_000_000) == 4 * 10**14

    def test_admin_share(self):
        """Half of the collected fee."""
        assert admin_share(4 * 10**14, 5_000_000_000) == 2 * 10**14

    def test_fee_truncates(self):
        """Fees round down, in favour of the payer."""
        assert swap_fee(2499, 4_000_000) == 0

    def test_imbalance_fee_rate(self):
        """For two assets the per-asset rate is fee / 2."""
        assert imbalance_fee_rate(4_000_000) == 2_000_000

    def test_caps(self):
        """Caps are inclusive."""
        validate_fees(MAX_FEE, MAX_ADMIN_FEE)
        validate_fees(0, 0)

    @pytest.mark.parametrize(
        "fee,admin_fee",
        [(MAX_FEE + 1, 0), (0, MAX_ADMIN_FEE + 1), (-1, 0), (0, -1)],
    )
    def test_out_of_range(self, fee, admin_fee):
        """Anything outside the caps is rejected."""
        with pytest.raises(InvalidParameterError):
            validate_fees(fee, admin_fee)


class TestImbalanceFees:
    """Tests for apply_imbalance_fees."""

    def test_proportional_change_is_free(self):
        """A deposit matching current proportions pays nothing."""
        charged = apply_imbalance_fees(
            [1000 * ONE, 1000 * ONE],
            [1100 * ONE, 1100 * ONE],
            2000 * ONE,
            2200 * ONE,
            4_000_000,
            5_000_000_000,
        )
        assert charged.fees == (0, 0)
        assert charged.stored_balances == (1100 * ONE, 1100 * ONE)
        assert charged.fee_adjusted_balances == (1100 * ONE, 1100 * ONE)

    def test_one_sided_change(self):
        """Each asset pays on its distance from the ideal balance."""
        charged = apply_imbalance_fees(
            [1000 * ONE, 1000 * ONE],
            [1100 * ONE, 1000 * ONE],
            2000 * ONE,
            2100 * ONE,
            4_000_000,
            5_000_000_000,
        )
        # ideal = 1050 for both; |diff| = 50; 50 * 2e6 / 1e10 = 0.01
        assert charged.fees == (10**16, 10**16)
        assert charged.stored_balances == (1100 * ONE - 5 * 10**15, 1000 * ONE - 5 * 10**15)
        assert charged.fee_adjusted_balances == (1100 * ONE - 10**16, 1000 * ONE - 10**16)

    def test_stored_never_below_adjusted(self):
        """Only the admin share leaves the stored balances."""
        charged = apply_imbalance_fees(
            [500 * ONE, 1500 * ONE],
            [900 * ONE, 1500 * ONE],
            1950 * ONE,
            2340 * ONE,
            4_000_000,
            3_000_000_000,
        )
        for stored, adjusted in zip(
            charged.stored_balances, charged.fee_adjusted_balances, strict=True
        ):
            assert stored >= adjusted


class TestFeeSchedule:
    """Tests for the commit / apply / revert lifecycle."""

    def test_rejects_invalid_initial_values(self):
        """Initial fees are validated on construction."""
        with pytest.raises(InvalidParameterError):
            FeeSchedule(fee=MAX_FEE + 1, admin_fee=0)

    def test_apply_after_delay(self):
        """Committed fees become active once the delay has elapsed."""
        schedule = FeeSchedule(fee=4_000_000, admin_fee=0)
        pending = schedule.commit(1_000_000, 5_000_000_000, T0)
        assert pending.deadline == T0 + ADMIN_ACTIONS_DELAY

        schedule.apply(T0 + ADMIN_ACTIONS_DELAY)
        assert (schedule.fee, schedule.admin_fee) == (1_000_000, 5_000_000_000)
        assert schedule.pending is None

    def test_apply_before_delay(self):
        """Applying early is rejected and keeps the pending change."""
        schedule = FeeSchedule(fee=4_000_000, admin_fee=0)
        schedule.commit(1_000_000, 0, T0)
        with pytest.raises(AdminActionNotReadyError):
            schedule.apply(T0 + ADMIN_ACTIONS_DELAY - 1)
        assert schedule.fee == 4_000_000
        assert schedule.pending is not None

    def test_apply_without_pending(self):
        """Nothing to apply."""
        with pytest.raises(AdminActionNotReadyError):
            FeeSchedule(fee=4_000_000, admin_fee=0).apply(T0)

    def test_second_commit_rejected(self):
        """Only one change can be pending."""
        schedule = FeeSchedule(fee=4_000_000, admin_fee=0)
        schedule.commit(1_000_000, 0, T0)
        with pytest.raises(AdminActionPendingError):
            schedule.commit(2_000_000, 0, T0)

    def test_revert_clears_pending(self):
        """Reverting drops the staged change and allows a new commit."""
        schedule = FeeSchedule(fee=4_000_000, admin_fee=0)
        schedule.commit(1_000_000, 0, T0)
        schedule.revert()
        assert schedule.pending is None
        schedule.commit(2_000_000, 0, T0)

    def test_invalid_commit_leaves_nothing_pending(self):
        """Out-of-range commits are rejected before staging."""
        schedule = FeeSchedule(fee=4_000_000, admin_fee=0)
        with pytest.raises(InvalidParameterError):
            schedule.commit(MAX_FEE + 1, 0, T0)
        assert schedule.pending is None
