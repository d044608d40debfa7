"""Two-asset stableswap pool.

StableSwapPool owns the pool's mutable state (balances, fee schedule,
amplification ramp, kill flag) and orchestrates swaps and liquidity
changes on top of the invariant solvers and the fee engine. Share
accounting and asset movement are delegated to the collaborators in
stableswap.pool.collaborators.

Every state-mutating operation is:
- non-reentrant: a nested call from the same thread raises ReentrancyError,
  calls from other threads wait for the running one to finish
- all-or-nothing: pool state is snapshotted on entry and restored if
  anything raises, the vault and share ledger transactions roll back with
  it, and events are published only on success

Inside an operation the order is fixed: validate, read state, compute,
check slippage bounds, burn shares, pull assets, commit balances, push
assets, mint shares.
"""

from __future__ import annotations

import copy
import dataclasses
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import structlog

from stableswap.amm.amplification import AmplificationRamp
from stableswap.amm.fees import (
    FeeSchedule,
    PendingFeeChange,
    admin_share,
    apply_imbalance_fees,
    imbalance_fee_rate,
    swap_fee,
)
from stableswap.amm.invariant import get_d, get_y, get_y_d
from stableswap.constants import DEFAULT_NATIVE_TRANSFER_GAS, KILL_DEADLINE_DT, NATIVE_ASSET
from stableswap.errors import (
    InvalidParameterError,
    InvariantViolationError,
    KillDeadlinePassedError,
    PoolKilledError,
    ReentrancyError,
    SlippageError,
)
from stableswap.math.fixed_point import (
    FEE_DENOMINATOR,
    N_COINS,
    PRECISION,
    denormalize,
    mul_div,
    normalize,
    rate_for,
    xp,
)
from stableswap.pool.collaborators import (
    AccessControl,
    AssetVault,
    Clock,
    OwnerAccessControl,
    ShareLedger,
    system_clock,
)
from stableswap.pool.config import PoolConfig
from stableswap.pool.events import (
    AddLiquidity,
    CommitNewFee,
    DonateAdminFees,
    Kill,
    NewFee,
    NewNativeTransferGas,
    PoolEvent,
    RampA,
    RemoveLiquidity,
    RemoveLiquidityImbalance,
    RemoveLiquidityOne,
    RevertNewFee,
    StopRampA,
    TokenExchange,
    Unkill,
    WithdrawAdminFees,
)
from stableswap.safe_int import S

logger = structlog.get_logger()


@dataclass
class PoolState:
    """Everything a pool operation may change.

    Attributes:
        balances: Tracked per-asset balances in native units; real holdings
            minus these is the accumulated admin fee
        fees: Active and pending fee parameters
        ramp: Amplification schedule
        kill_deadline: Unix time after which the pool can no longer be killed
        is_killed: Emergency stop flag
        native_transfer_gas: Gas stipend for native-asset payouts
    """

    balances: list[int]
    fees: FeeSchedule
    ramp: AmplificationRamp
    kill_deadline: int
    is_killed: bool = False
    native_transfer_gas: int = DEFAULT_NATIVE_TRANSFER_GAS


@dataclass(frozen=True)
class SwapQuote:
    """Breakdown of a swap.

    Attributes:
        dy: Net output paid to the trader, native units of the output asset
        dy_gross: Output before fees, normalized units
        dy_fee: Swap fee, normalized units
        fee: Swap fee, native units of the output asset
        admin_fee_xp: Admin share of the fee, normalized units
        admin_fee: Admin share of the fee, native units
    """

    dy: int
    dy_gross: int
    dy_fee: int
    fee: int
    admin_fee_xp: int
    admin_fee: int


class StableSwapPool:
    """Two-asset amplified stableswap pool.

    Args:
        config: Creation-time parameters (assets, decimals, initial A and fees)
        shares: Pool-share ledger
        vault: Asset transfer layer
        access: Admin gate; defaults to an owner-only gate for config.owner
        clock: Source of the current unix time
    """

    def __init__(
        self,
        config: PoolConfig,
        *,
        shares: ShareLedger,
        vault: AssetVault,
        access: AccessControl | None = None,
        clock: Clock = system_clock,
    ) -> None:
        self.config = config
        self.coins: tuple[str, ...] = tuple(config.coins)
        self.rates: tuple[int, ...] = tuple(rate_for(d) for d in config.decimals)

        self._shares = shares
        self._vault = vault
        self._access = access if access is not None else OwnerAccessControl(config.owner)
        self._clock = clock

        self._state = PoolState(
            balances=[0] * N_COINS,
            fees=FeeSchedule(fee=config.fee, admin_fee=config.admin_fee),
            ramp=AmplificationRamp.constant(config.amplification),
            kill_deadline=clock() + KILL_DEADLINE_DT,
        )

        self.events: list[PoolEvent] = []
        self._pending_events: list[PoolEvent] = []
        self._lock = threading.Lock()
        self._lock_owner: int | None = None

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def balances(self) -> tuple[int, ...]:
        return tuple(self._state.balances)

    @property
    def fee(self) -> int:
        return self._state.fees.fee

    @property
    def admin_fee(self) -> int:
        return self._state.fees.admin_fee

    @property
    def pending_fee_change(self) -> PendingFeeChange | None:
        return self._state.fees.pending

    @property
    def amplification(self) -> AmplificationRamp:
        """Copy of the amplification schedule."""
        return dataclasses.replace(self._state.ramp)

    @property
    def is_killed(self) -> bool:
        return self._state.is_killed

    @property
    def kill_deadline(self) -> int:
        return self._state.kill_deadline

    @property
    def native_transfer_gas(self) -> int:
        return self._state.native_transfer_gas

    @property
    def total_supply(self) -> int:
        return self._shares.total_supply()

    # =========================================================================
    # Concurrency and atomicity
    # =========================================================================

    def _check_not_reentrant(self, name: str) -> None:
        if self._lock_owner == threading.get_ident():
            logger.warning("reentrant_call_rejected", operation=name)
            raise ReentrancyError(f"{name} called while another pool operation is running")

    @contextmanager
    def _operation(self, name: str) -> Iterator[PoolState]:
        """Run one state-mutating operation, non-reentrant and all-or-nothing.

        Vault and ledger transactions are entered before the pool lock so that
        pools sharing collaborators always acquire locks in the same order.
        """
        self._check_not_reentrant(name)
        with self._vault.transaction(), self._shares.transaction(), self._lock:
            self._lock_owner = threading.get_ident()
            snapshot = copy.deepcopy(self._state)
            self._pending_events = []
            try:
                yield self._state
            except BaseException:
                self._state = snapshot
                raise
            else:
                self._publish()
            finally:
                self._pending_events = []
                self._lock_owner = None

    @contextmanager
    def _view(self, name: str) -> Iterator[PoolState]:
        """Read state consistently; rejected while an operation is mid-flight."""
        self._check_not_reentrant(name)
        with self._lock:
            yield self._state

    def _emit(self, event: PoolEvent) -> None:
        self._pending_events.append(event)

    def _publish(self) -> None:
        for event in self._pending_events:
            self.events.append(event)
            logger.info(event.name, **event.fields())

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _check_index(self, name: str, index: int) -> None:
        if index < 0 or index >= N_COINS:
            raise InvalidParameterError(f"{name} {index} out of range for {N_COINS} coins")

    def _check_amount(self, name: str, amount: int) -> None:
        if amount < 0:
            raise InvalidParameterError(f"{name} cannot be negative, got {amount}")

    def _check_amounts(self, name: str, amounts: Sequence[int]) -> list[int]:
        if len(amounts) != N_COINS:
            raise InvalidParameterError(f"{name} must have {N_COINS} entries, got {len(amounts)}")
        for amount in amounts:
            self._check_amount(name, amount)
        return list(amounts)

    def _check_attached_value(self, native_amount: int, value: int) -> None:
        if value != native_amount:
            raise InvalidParameterError(
                f"Attached value {value} does not match native amount {native_amount}"
            )

    def _native_amount(self, amounts: Sequence[int]) -> int:
        return sum(a for coin, a in zip(self.coins, amounts, strict=True) if coin == NATIVE_ASSET)

    def _require_alive(self, state: PoolState) -> None:
        if state.is_killed:
            raise PoolKilledError("Pool is killed")

    def _require_supply(self) -> int:
        total_supply = self._shares.total_supply()
        if total_supply == 0:
            raise InvariantViolationError("Pool has no shares outstanding")
        return total_supply

    def _check_slippage(self, operation: str, ok: bool, message: str, **context: int) -> None:
        if not ok:
            logger.warning("slippage_exceeded", operation=operation, **context)
            raise SlippageError(message)

    # =========================================================================
    # Asset movement
    # =========================================================================

    def _pull(self, k: int, amount: int, sender: str) -> None:
        if amount == 0:
            return
        coin = self.coins[k]
        value = amount if coin == NATIVE_ASSET else 0
        self._vault.transfer_in(coin, amount, sender=sender, value=value)

    def _pay_out(self, state: PoolState, k: int, amount: int, recipient: str) -> None:
        if amount == 0:
            return
        coin = self.coins[k]
        gas_limit = state.native_transfer_gas if coin == NATIVE_ASSET else None
        self._vault.transfer_out(coin, amount, recipient=recipient, gas_limit=gas_limit)

    # =========================================================================
    # Pure calculations on a state snapshot
    # =========================================================================

    def _xp(self, balances: Sequence[int]) -> list[int]:
        return xp(balances, self.rates)

    def _quote_exchange(
        self, state: PoolState, amp: int, i: int, j: int, dx: int
    ) -> SwapQuote:
        xp_ = self._xp(state.balances)
        x = xp_[i] + normalize(dx, self.rates[i])
        y = get_y(i, j, x, xp_, amp)

        # -1 in case there were rounding errors, in the pool's favour
        dy = (S(xp_[j]) - y - 1).value
        dy_fee = swap_fee(dy, state.fees.fee)
        admin_fee_xp = admin_share(dy_fee, state.fees.admin_fee)
        return SwapQuote(
            dy=denormalize(dy - dy_fee, self.rates[j]),
            dy_gross=dy,
            dy_fee=dy_fee,
            fee=denormalize(dy_fee, self.rates[j]),
            admin_fee_xp=admin_fee_xp,
            admin_fee=denormalize(admin_fee_xp, self.rates[j]),
        )

    def _calc_withdraw_one_coin(
        self, state: PoolState, amp: int, share_amount: int, i: int, total_supply: int
    ) -> tuple[int, int]:
        """Net output of a single-coin withdrawal and the fee it paid (native units).

        The fee is charged on the rebalancing every asset would need to reach
        the reduced invariant D1, so withdrawing in one coin costs the same as
        a proportional withdrawal followed by a swap.
        """
        xp_ = self._xp(state.balances)
        d0 = get_d(xp_, amp)
        d1 = (S(d0) - mul_div(share_amount, d0, total_supply)).value
        new_y = get_y_d(amp, i, xp_, d1)

        rate = imbalance_fee_rate(state.fees.fee)
        xp_reduced = list(xp_)
        for k in range(N_COINS):
            scaled = mul_div(xp_[k], d1, d0)
            if k == i:
                dx_expected = S(scaled) - new_y
            else:
                dx_expected = S(xp_[k]) - scaled
            xp_reduced[k] = (S(xp_reduced[k]) - S(rate) * dx_expected // FEE_DENOMINATOR).value

        dy = S(xp_reduced[i]) - get_y_d(amp, i, xp_reduced, d1)
        # Withdraw less to account for rounding errors
        dy = denormalize((dy - 1).value, self.rates[i])
        dy_without_fee = denormalize((S(xp_[i]) - new_y).value, self.rates[i])
        return dy, (S(dy_without_fee) - dy).value

    # =========================================================================
    # Views
    # =========================================================================

    def a(self) -> int:
        """Amplification coefficient in effect now."""
        with self._view("a") as state:
            return state.ramp.effective_a(self._clock())

    def get_virtual_price(self) -> int:
        """Value of one pool share in normalized units (1e18 scale).

        Raises:
            InvariantViolationError: If no shares are outstanding
        """
        with self._view("get_virtual_price") as state:
            amp = state.ramp.effective_a(self._clock())
            d = get_d(self._xp(state.balances), amp)
            return mul_div(d, PRECISION, self._require_supply())

    def quote_exchange(self, i: int, j: int, dx: int) -> SwapQuote:
        """Full fee breakdown of swapping `dx` of asset i for asset j."""
        self._check_index("i", i)
        self._check_index("j", j)
        self._check_amount("dx", dx)
        with self._view("quote_exchange") as state:
            return self._quote_exchange(state, state.ramp.effective_a(self._clock()), i, j, dx)

    def get_dy(self, i: int, j: int, dx: int) -> int:
        """Amount of asset j received for `dx` of asset i, after fees."""
        return self.quote_exchange(i, j, dx).dy

    def calc_token_amount(self, amounts: Sequence[int], is_deposit: bool) -> int:
        """Estimate shares minted (deposit) or burned (withdrawal), ignoring fees.

        For a deposit into an empty pool this is the invariant of the
        deposit, which is what add_liquidity would mint.
        """
        amounts = self._check_amounts("amounts", amounts)
        with self._view("calc_token_amount") as state:
            amp = state.ramp.effective_a(self._clock())
            d0 = get_d(self._xp(state.balances), amp)
            if is_deposit:
                new_balances = [b + a for b, a in zip(state.balances, amounts, strict=True)]
            else:
                new_balances = [
                    (S(b) - a).value for b, a in zip(state.balances, amounts, strict=True)
                ]
            d1 = get_d(self._xp(new_balances), amp)

            total_supply = self._shares.total_supply()
            if total_supply == 0 and is_deposit:
                return d1
            diff = S(d1) - d0 if is_deposit else S(d0) - d1
            return mul_div(diff.value, total_supply, d0)

    def calc_withdraw_one_coin(self, share_amount: int, i: int) -> int:
        """Amount of asset i received for burning `share_amount` shares."""
        self._check_index("i", i)
        self._check_amount("share_amount", share_amount)
        with self._view("calc_withdraw_one_coin") as state:
            total_supply = self._require_supply()
            amp = state.ramp.effective_a(self._clock())
            dy, _ = self._calc_withdraw_one_coin(state, amp, share_amount, i, total_supply)
            return dy

    def admin_balances(self, i: int) -> int:
        """Accumulated admin fees of asset i: real holdings minus tracked balance."""
        self._check_index("i", i)
        with self._view("admin_balances") as state:
            return (S(self._vault.holdings(self.coins[i])) - state.balances[i]).value

    # =========================================================================
    # Swaps and liquidity
    # =========================================================================

    def exchange(
        self, i: int, j: int, dx: int, min_dy: int, *, sender: str, value: int = 0
    ) -> int:
        """Swap `dx` of asset i for at least `min_dy` of asset j.

        The admin share of the fee stays in the pool but is removed from the
        tracked balance of asset j.

        Args:
            i: Index of the asset sold
            j: Index of the asset bought
            dx: Amount sold, native units of asset i
            min_dy: Minimum acceptable output, native units of asset j
            sender: Trader; pays dx and receives the output
            value: Native value attached to the call

        Returns:
            Amount of asset j paid out

        Raises:
            InvalidParameterError: Bad indices, negative amount, value mismatch
            PoolKilledError: If the pool is killed
            SlippageError: If the output is below min_dy
        """
        self._check_index("i", i)
        self._check_index("j", j)
        if i == j:
            raise InvalidParameterError("Cannot swap an asset with itself")
        self._check_amount("dx", dx)
        self._check_attached_value(dx if self.coins[i] == NATIVE_ASSET else 0, value)

        with self._operation("exchange") as state:
            self._require_alive(state)
            amp = state.ramp.effective_a(self._clock())
            old_balances = list(state.balances)
            quote = self._quote_exchange(state, amp, i, j, dx)
            self._check_slippage(
                "exchange",
                quote.dy >= min_dy,
                f"Exchange resulted in {quote.dy}, fewer coins than the {min_dy} expected",
                dy=quote.dy,
                min_dy=min_dy,
            )

            self._pull(i, dx, sender)
            state.balances[i] = old_balances[i] + dx
            # When rounding errors happen, we undercharge admin fee in favor of LP
            state.balances[j] = (S(old_balances[j]) - quote.dy - quote.admin_fee).value
            self._pay_out(state, j, quote.dy, sender)

            self._emit(
                TokenExchange(
                    buyer=sender,
                    sold_id=i,
                    tokens_sold=dx,
                    bought_id=j,
                    tokens_bought=quote.dy,
                    admin_fee=quote.admin_fee,
                )
            )
            return quote.dy

    def add_liquidity(
        self, amounts: Sequence[int], min_mint_amount: int, *, sender: str, value: int = 0
    ) -> int:
        """Deposit assets and mint pool shares.

        Algorithm:
            1. D0 from current balances, D1 after the raw deposit (D1 > D0)
            2. First deposit: every amount must be positive, mint D1
            3. Otherwise: charge the imbalance fee per asset, recompute D2 on
               the fee-adjusted balances, mint supply * (D2 - D0) / D0

        Args:
            amounts: Amount of each asset to deposit, native units
            min_mint_amount: Minimum shares to mint
            sender: Depositor; pays the assets and receives the shares
            value: Native value attached to the call

        Returns:
            Shares minted

        Raises:
            InvalidParameterError: Bad amounts, value mismatch, or a first
                deposit missing an asset
            InvariantViolationError: If the deposit does not raise D
            PoolKilledError: If the pool is killed
            SlippageError: If fewer than min_mint_amount shares would be minted
        """
        amounts = self._check_amounts("amounts", amounts)
        self._check_attached_value(self._native_amount(amounts), value)

        with self._operation("add_liquidity") as state:
            self._require_alive(state)
            amp = state.ramp.effective_a(self._clock())
            fees = state.fees
            old_balances = list(state.balances)
            total_supply = self._shares.total_supply()

            if total_supply == 0 and any(amount == 0 for amount in amounts):
                raise InvalidParameterError("Initial deposit requires all coins")

            d0 = get_d(self._xp(old_balances), amp)
            new_balances = [b + a for b, a in zip(old_balances, amounts, strict=True)]
            d1 = get_d(self._xp(new_balances), amp)
            if d1 <= d0:
                raise InvariantViolationError(f"Deposit must increase D: D0={d0}, D1={d1}")

            if total_supply > 0:
                # Only account for fees if we are not the first to deposit
                charged = apply_imbalance_fees(
                    old_balances, new_balances, d0, d1, fees.fee, fees.admin_fee
                )
                charged_fees = charged.fees
                stored_balances = list(charged.stored_balances)
                d2 = get_d(self._xp(charged.fee_adjusted_balances), amp)
                mint_amount = mul_div(total_supply, (S(d2) - d0).value, d0)
            else:
                charged_fees = (0,) * N_COINS
                stored_balances = new_balances
                # Take the dust if there was any
                mint_amount = d1

            self._check_slippage(
                "add_liquidity",
                mint_amount >= min_mint_amount,
                f"Deposit would mint {mint_amount}, fewer than the {min_mint_amount} expected",
                mint_amount=mint_amount,
                min_mint_amount=min_mint_amount,
            )

            for k, amount in enumerate(amounts):
                self._pull(k, amount, sender)
            state.balances = stored_balances
            self._shares.mint(sender, mint_amount)

            self._emit(
                AddLiquidity(
                    provider=sender,
                    token_amounts=tuple(amounts),
                    fees=tuple(charged_fees),
                    invariant=d1,
                    token_supply=total_supply + mint_amount,
                )
            )
            return mint_amount

    def remove_liquidity(
        self, share_amount: int, min_amounts: Sequence[int], *, sender: str
    ) -> tuple[int, ...]:
        """Burn shares for a proportional amount of every asset.

        No fee is charged and no invariant is computed, so this stays
        available while the pool is killed.

        Raises:
            InvariantViolationError: If no shares are outstanding
            SlippageError: If any amount is below its minimum
            InsufficientBalanceError: If sender holds fewer shares (from the ledger)
        """
        self._check_amount("share_amount", share_amount)
        min_amounts = self._check_amounts("min_amounts", min_amounts)

        with self._operation("remove_liquidity") as state:
            total_supply = self._require_supply()
            old_balances = list(state.balances)
            amounts = [mul_div(balance, share_amount, total_supply) for balance in old_balances]
            for k in range(N_COINS):
                self._check_slippage(
                    "remove_liquidity",
                    amounts[k] >= min_amounts[k],
                    f"Withdrawal of coin {k} resulted in {amounts[k]}, "
                    f"fewer than the {min_amounts[k]} expected",
                    coin_index=k,
                    amount=amounts[k],
                    min_amount=min_amounts[k],
                )

            self._shares.burn_from(sender, share_amount)
            state.balances = [
                (S(balance) - amount).value
                for balance, amount in zip(old_balances, amounts, strict=True)
            ]
            for k, amount in enumerate(amounts):
                self._pay_out(state, k, amount, sender)

            self._emit(
                RemoveLiquidity(
                    provider=sender,
                    token_amounts=tuple(amounts),
                    token_supply=total_supply - share_amount,
                )
            )
            return tuple(amounts)

    def remove_liquidity_imbalance(
        self, amounts: Sequence[int], max_burn_amount: int, *, sender: str
    ) -> int:
        """Withdraw exact asset amounts, burning whatever shares that costs.

        Mirror of add_liquidity: the imbalance fee is charged on each asset's
        deviation from its proportional share, and one extra share is burned
        so rounding never favours the withdrawer.

        Returns:
            Shares burned

        Raises:
            InvalidParameterError: Bad amounts or more than the pool holds
            InvariantViolationError: If no shares are outstanding or the
                withdrawal would burn nothing
            PoolKilledError: If the pool is killed
            SlippageError: If the burn exceeds max_burn_amount
        """
        amounts = self._check_amounts("amounts", amounts)

        with self._operation("remove_liquidity_imbalance") as state:
            self._require_alive(state)
            amp = state.ramp.effective_a(self._clock())
            fees = state.fees
            total_supply = self._require_supply()
            old_balances = list(state.balances)

            for k, amount in enumerate(amounts):
                if amount > old_balances[k]:
                    raise InvalidParameterError(
                        f"Cannot withdraw {amount} of coin {k}, pool holds {old_balances[k]}"
                    )

            d0 = get_d(self._xp(old_balances), amp)
            new_balances = [b - a for b, a in zip(old_balances, amounts, strict=True)]
            d1 = get_d(self._xp(new_balances), amp)

            charged = apply_imbalance_fees(
                old_balances, new_balances, d0, d1, fees.fee, fees.admin_fee
            )
            d2 = get_d(self._xp(charged.fee_adjusted_balances), amp)

            burn_amount = mul_div((S(d0) - d2).value, total_supply, d0)
            if burn_amount == 0:
                raise InvariantViolationError("Withdrawal would burn zero shares")
            # In case of rounding errors, make it unfavorable for the withdrawer
            burn_amount += 1
            self._check_slippage(
                "remove_liquidity_imbalance",
                burn_amount <= max_burn_amount,
                f"Withdrawal would burn {burn_amount}, more than the {max_burn_amount} allowed",
                burn_amount=burn_amount,
                max_burn_amount=max_burn_amount,
            )

            self._shares.burn_from(sender, burn_amount)
            state.balances = list(charged.stored_balances)
            for k, amount in enumerate(amounts):
                self._pay_out(state, k, amount, sender)

            self._emit(
                RemoveLiquidityImbalance(
                    provider=sender,
                    token_amounts=tuple(amounts),
                    fees=charged.fees,
                    invariant=d1,
                    token_supply=total_supply - burn_amount,
                )
            )
            return burn_amount

    def remove_liquidity_one_coin(
        self, share_amount: int, i: int, min_amount: int, *, sender: str
    ) -> int:
        """Burn shares and withdraw a single asset.

        Returns:
            Amount of asset i paid out

        Raises:
            InvalidParameterError: Bad index or negative amount
            InvariantViolationError: If no shares are outstanding
            PoolKilledError: If the pool is killed
            SlippageError: If the output is below min_amount
        """
        self._check_index("i", i)
        self._check_amount("share_amount", share_amount)

        with self._operation("remove_liquidity_one_coin") as state:
            self._require_alive(state)
            amp = state.ramp.effective_a(self._clock())
            total_supply = self._require_supply()
            dy, dy_fee = self._calc_withdraw_one_coin(state, amp, share_amount, i, total_supply)
            self._check_slippage(
                "remove_liquidity_one_coin",
                dy >= min_amount,
                f"Withdrawal resulted in {dy}, fewer coins than the {min_amount} expected",
                dy=dy,
                min_amount=min_amount,
            )

            self._shares.burn_from(sender, share_amount)
            kept_for_admin = admin_share(dy_fee, state.fees.admin_fee)
            state.balances[i] = (S(state.balances[i]) - dy - kept_for_admin).value
            self._pay_out(state, i, dy, sender)

            self._emit(
                RemoveLiquidityOne(
                    provider=sender,
                    coin_index=i,
                    token_amount=share_amount,
                    coin_amount=dy,
                    fee=dy_fee,
                )
            )
            return dy

    # =========================================================================
    # Administration
    # =========================================================================

    def ramp_amplification_coefficient(
        self, future_a: int, future_time: int, *, sender: str
    ) -> None:
        """Start a linear ramp of A towards `future_a`, reached at `future_time`."""
        self._access.require_admin(sender)
        with self._operation("ramp_amplification_coefficient") as state:
            now = self._clock()
            old_a = state.ramp.ramp(future_a, future_time, now)
            self._emit(
                RampA(old_a=old_a, new_a=future_a, initial_time=now, future_time=future_time)
            )

    def stop_ramp_amplification_coefficient(self, *, sender: str) -> None:
        """Freeze A at its current effective value."""
        self._access.require_admin(sender)
        with self._operation("stop_ramp_amplification_coefficient") as state:
            now = self._clock()
            current_a = state.ramp.stop(now)
            self._emit(StopRampA(a=current_a, t=now))

    def commit_new_fee(self, new_fee: int, new_admin_fee: int, *, sender: str) -> None:
        """Stage new fee parameters, applicable after ADMIN_ACTIONS_DELAY."""
        self._access.require_admin(sender)
        with self._operation("commit_new_fee") as state:
            pending = state.fees.commit(new_fee, new_admin_fee, self._clock())
            self._emit(
                CommitNewFee(
                    deadline=pending.deadline, fee=pending.fee, admin_fee=pending.admin_fee
                )
            )

    def apply_new_fee(self, *, sender: str) -> None:
        """Activate the staged fee parameters once their delay has elapsed."""
        self._access.require_admin(sender)
        with self._operation("apply_new_fee") as state:
            applied = state.fees.apply(self._clock())
            self._emit(NewFee(fee=applied.fee, admin_fee=applied.admin_fee))

    def revert_new_parameters(self, *, sender: str) -> None:
        """Drop the staged fee parameters."""
        self._access.require_admin(sender)
        with self._operation("revert_new_parameters") as state:
            state.fees.revert()
            self._emit(RevertNewFee())

    def kill_me(self, *, sender: str) -> None:
        """Stop swaps and deposits. Only possible before the kill deadline."""
        self._access.require_admin(sender)
        with self._operation("kill_me") as state:
            now = self._clock()
            if now >= state.kill_deadline:
                raise KillDeadlinePassedError(
                    f"Kill deadline {state.kill_deadline} has passed (now {now})"
                )
            state.is_killed = True
            self._emit(Kill())

    def unkill_me(self, *, sender: str) -> None:
        self._access.require_admin(sender)
        with self._operation("unkill_me") as state:
            state.is_killed = False
            self._emit(Unkill())

    def withdraw_admin_fees(self, *, sender: str) -> tuple[int, ...]:
        """Send the accumulated admin fees of every asset to the admin."""
        self._access.require_admin(sender)
        with self._operation("withdraw_admin_fees") as state:
            amounts = tuple(
                (S(self._vault.holdings(coin)) - balance).value
                for coin, balance in zip(self.coins, state.balances, strict=True)
            )
            for k, amount in enumerate(amounts):
                self._pay_out(state, k, amount, sender)
            self._emit(WithdrawAdminFees(recipient=sender, amounts=amounts))
            return amounts

    def donate_admin_fees(self, *, sender: str) -> tuple[int, ...]:
        """Fold the accumulated admin fees into the balances owned by liquidity providers."""
        self._access.require_admin(sender)
        with self._operation("donate_admin_fees") as state:
            holdings = [self._vault.holdings(coin) for coin in self.coins]
            donated = tuple(
                (S(held) - balance).value
                for held, balance in zip(holdings, state.balances, strict=True)
            )
            state.balances = holdings
            self._emit(DonateAdminFees(amounts=donated))
            return donated

    def set_native_transfer_gas(self, gas: int, *, sender: str) -> None:
        """Set the gas stipend forwarded with native-asset payouts."""
        self._access.require_admin(sender)
        if gas <= 0:
            raise InvalidParameterError(f"Native transfer gas must be positive, got {gas}")
        with self._operation("set_native_transfer_gas") as state:
            state.native_transfer_gas = gas
            self._emit(NewNativeTransferGas(gas=gas))
