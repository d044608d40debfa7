"""Pydantic models for the quote API.

Amounts are uint256 decimal strings on the wire, as token amounts usually
are in JSON; the endpoints convert them to ints before calling the pool.
"""

from pydantic import BaseModel, Field

from stableswap.math.fixed_point import N_COINS
from stableswap.models.types import Address, Uint256


class ExchangeQuoteRequest(BaseModel):
    """Quote for swapping `dx` of asset i into asset j."""

    i: int = Field(ge=0, lt=N_COINS, description="Index of the asset sold")
    j: int = Field(ge=0, lt=N_COINS, description="Index of the asset bought")
    dx: Uint256 = Field(description="Amount sold, native units")


class ExchangeQuoteResponse(BaseModel):
    dy: Uint256 = Field(description="Amount received after fees, native units")
    fee: Uint256 = Field(description="Swap fee, native units of asset j")
    admin_fee: Uint256 = Field(
        alias="adminFee", description="Admin share of the fee, native units of asset j"
    )

    model_config = {"populate_by_name": True}


class TokenAmountQuoteRequest(BaseModel):
    """Estimate of shares minted (deposit) or burned (withdrawal)."""

    amounts: list[Uint256] = Field(min_length=N_COINS, max_length=N_COINS)
    is_deposit: bool = Field(alias="isDeposit")

    model_config = {"populate_by_name": True}


class TokenAmountQuoteResponse(BaseModel):
    shares: Uint256


class WithdrawOneCoinQuoteRequest(BaseModel):
    """Quote for burning `share_amount` shares into asset i only."""

    share_amount: Uint256 = Field(alias="shareAmount")
    i: int = Field(ge=0, lt=N_COINS)

    model_config = {"populate_by_name": True}


class WithdrawOneCoinQuoteResponse(BaseModel):
    dy: Uint256


class PoolSnapshot(BaseModel):
    """Current view of the pool."""

    coins: list[Address]
    balances: list[Uint256]
    amplification: int
    fee: int = Field(description="Swap fee, 1e10 scale")
    admin_fee: int = Field(alias="adminFee", description="Admin fraction, 1e10 scale")
    total_supply: Uint256 = Field(alias="totalSupply")
    virtual_price: Uint256 | None = Field(
        default=None,
        alias="virtualPrice",
        description="Share value at 1e18 scale; absent while no shares exist",
    )
    is_killed: bool = Field(alias="isKilled")

    model_config = {"populate_by_name": True}
