"""Observability events published by the pool.

Events are informational only: nothing in the engine reads them back. The
pool buffers them during an operation and publishes them (to `pool.events`
and the structlog logger) only when the operation succeeds.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class PoolEvent:
    """Base class; `name` is the snake_case log event."""

    name: ClassVar[str] = "pool_event"

    def fields(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TokenExchange(PoolEvent):
    name: ClassVar[str] = "token_exchange"

    buyer: str
    sold_id: int
    tokens_sold: int
    bought_id: int
    tokens_bought: int
    admin_fee: int


@dataclass(frozen=True)
class AddLiquidity(PoolEvent):
    name: ClassVar[str] = "add_liquidity"

    provider: str
    token_amounts: tuple[int, ...]
    fees: tuple[int, ...]
    invariant: int
    token_supply: int


@dataclass(frozen=True)
class RemoveLiquidity(PoolEvent):
    name: ClassVar[str] = "remove_liquidity"

    provider: str
    token_amounts: tuple[int, ...]
    token_supply: int


@dataclass(frozen=True)
class RemoveLiquidityImbalance(PoolEvent):
    name: ClassVar[str] = "remove_liquidity_imbalance"

    provider: str
    token_amounts: tuple[int, ...]
    fees: tuple[int, ...]
    invariant: int
    token_supply: int


@dataclass(frozen=True)
class RemoveLiquidityOne(PoolEvent):
    name: ClassVar[str] = "remove_liquidity_one"

    provider: str
    coin_index: int
    token_amount: int
    coin_amount: int
    fee: int


@dataclass(frozen=True)
class CommitNewFee(PoolEvent):
    name: ClassVar[str] = "commit_new_fee"

    deadline: int
    fee: int
    admin_fee: int


@dataclass(frozen=True)
class NewFee(PoolEvent):
    name: ClassVar[str] = "new_fee"

    fee: int
    admin_fee: int


@dataclass(frozen=True)
class RevertNewFee(PoolEvent):
    name: ClassVar[str] = "revert_new_fee"


@dataclass(frozen=True)
class RampA(PoolEvent):
    name: ClassVar[str] = "ramp_a"

    old_a: int
    new_a: int
    initial_time: int
    future_time: int


@dataclass(frozen=True)
class StopRampA(PoolEvent):
    name: ClassVar[str] = "stop_ramp_a"

    a: int
    t: int


@dataclass(frozen=True)
class Kill(PoolEvent):
    name: ClassVar[str] = "kill"


@dataclass(frozen=True)
class Unkill(PoolEvent):
    name: ClassVar[str] = "unkill"


@dataclass(frozen=True)
class WithdrawAdminFees(PoolEvent):
    name: ClassVar[str] = "withdraw_admin_fees"

    recipient: str
    amounts: tuple[int, ...]


@dataclass(frozen=True)
class DonateAdminFees(PoolEvent):
    name: ClassVar[str] = "donate_admin_fees"

    amounts: tuple[int, ...]


@dataclass(frozen=True)
class NewNativeTransferGas(PoolEvent):
    name: ClassVar[str] = "new_native_transfer_gas"

    gas: int
