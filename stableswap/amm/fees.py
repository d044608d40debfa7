"""Swap, admin and imbalance fees.

Fees are integers scaled by FEE_DENOMINATOR (1e10): a fee of 4_000_000 is
0.04%. The admin fee is the fraction of each collected fee kept by the pool
operator; it is left out of the tracked balances so it accumulates as the
gap between real holdings and `balances`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from stableswap.constants import ADMIN_ACTIONS_DELAY, MAX_ADMIN_FEE, MAX_FEE
from stableswap.errors import (
    AdminActionNotReadyError,
    AdminActionPendingError,
    InvalidParameterError,
)
from stableswap.math.fixed_point import FEE_DENOMINATOR, N_COINS
from stableswap.safe_int import S


def validate_fees(fee: int, admin_fee: int) -> None:
    """Check fee and admin fee against their caps.

    Raises:
        InvalidParameterError: If either value is out of range
    """
    if fee < 0 or fee > MAX_FEE:
        raise InvalidParameterError(f"Fee must be in [0, {MAX_FEE}], got {fee}")
    if admin_fee < 0 or admin_fee > MAX_ADMIN_FEE:
        raise InvalidParameterError(f"Admin fee must be in [0, {MAX_ADMIN_FEE}], got {admin_fee}")


def swap_fee(dy: int, fee: int) -> int:
    """Fee charged on a gross swap output `dy`."""
    return (S(dy) * fee // FEE_DENOMINATOR).value


def admin_share(fee_amount: int, admin_fee: int) -> int:
    """Part of a collected fee retained by the pool operator."""
    return (S(fee_amount) * admin_fee // FEE_DENOMINATOR).value


def imbalance_fee_rate(fee: int) -> int:
    """Per-asset fee rate for imbalanced liquidity changes: fee * n / (4 * (n - 1))."""
    return (S(fee) * N_COINS // (4 * (N_COINS - 1))).value


@dataclass(frozen=True)
class ImbalanceFees:
    """Result of charging the imbalance fee on a liquidity change.

    Attributes:
        fees: Fee charged per asset, in native units
        stored_balances: Balances to commit (only the admin share removed)
        fee_adjusted_balances: Balances with the full fee removed, used to
            compute the fee-adjusted invariant D2
    """

    fees: tuple[int, ...]
    stored_balances: tuple[int, ...]
    fee_adjusted_balances: tuple[int, ...]


def apply_imbalance_fees(
    old_balances: Sequence[int],
    new_balances: Sequence[int],
    d0: int,
    d1: int,
    fee: int,
    admin_fee: int,
) -> ImbalanceFees:
    """Charge the imbalance fee on each asset's deviation from its ideal balance.

    The ideal balance is where the asset would sit had the invariant moved
    from d0 to d1 proportionally: ideal = d1 * old / d0. The fee applies
    to |new - ideal|.

    Args:
        old_balances: Balances before the liquidity change
        new_balances: Balances after the raw deposit/withdrawal
        d0: Invariant before the change
        d1: Invariant after the change, before fees
        fee: Pool swap fee (1e10 scale)
        admin_fee: Admin fraction (1e10 scale)

    Returns:
        ImbalanceFees with per-asset fees and the resulting balance vectors
    """
    rate = imbalance_fee_rate(fee)
    fees: list[int] = []
    stored: list[int] = []
    adjusted: list[int] = []

    for old_balance, new_balance in zip(old_balances, new_balances, strict=True):
        ideal_balance = S(d1) * old_balance // d0
        difference = ideal_balance.abs_diff(new_balance)
        fee_i = S(rate) * difference // FEE_DENOMINATOR
        fees.append(fee_i.value)
        stored.append((S(new_balance) - admin_share(fee_i.value, admin_fee)).value)
        adjusted.append((S(new_balance) - fee_i).value)

    return ImbalanceFees(
        fees=tuple(fees),
        stored_balances=tuple(stored),
        fee_adjusted_balances=tuple(adjusted),
    )


@dataclass(frozen=True)
class PendingFeeChange:
    """Fee change committed but not yet applied."""

    deadline: int
    fee: int
    admin_fee: int


@dataclass
class FeeSchedule:
    """Active fee parameters plus at most one pending change.

    New values are staged with commit(), become active through apply() once
    ADMIN_ACTIONS_DELAY has elapsed, and can be dropped with revert().

    Attributes:
        fee: Active swap fee (1e10 scale)
        admin_fee: Active admin fraction (1e10 scale)
        pending: The staged change, if any
    """

    fee: int
    admin_fee: int
    pending: PendingFeeChange | None = None

    def __post_init__(self) -> None:
        validate_fees(self.fee, self.admin_fee)

    def commit(self, fee: int, admin_fee: int, now: int) -> PendingFeeChange:
        """Stage new fee parameters.

        Raises:
            AdminActionPendingError: If a change is already pending
            InvalidParameterError: If the new values exceed their caps
        """
        if self.pending is not None:
            raise AdminActionPendingError(
                f"Fee change already pending until {self.pending.deadline}"
            )
        validate_fees(fee, admin_fee)
        self.pending = PendingFeeChange(
            deadline=now + ADMIN_ACTIONS_DELAY, fee=fee, admin_fee=admin_fee
        )
        return self.pending

    def apply(self, now: int) -> PendingFeeChange:
        """Activate the pending change.

        Raises:
            AdminActionNotReadyError: If nothing is pending or the deadline
                has not been reached
        """
        if self.pending is None:
            raise AdminActionNotReadyError("No fee change pending")
        if now < self.pending.deadline:
            raise AdminActionNotReadyError(
                f"Fee change not active until {self.pending.deadline}, now {now}"
            )
        applied = self.pending
        self.fee = applied.fee
        self.admin_fee = applied.admin_fee
        self.pending = None
        return applied

    def revert(self) -> None:
        """Drop the pending change, if any."""
        self.pending = None
