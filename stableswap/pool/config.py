"""Pool creation parameters.

PoolConfig is validated once, at construction, and is immutable after
that: the asset pair, their decimals and the owner never change over a
pool's life. Fee and amplification values here are only the initial ones.
"""

from __future__ import annotations

import os
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from stableswap.constants import MAX_A, MAX_ADMIN_FEE, MAX_FEE, NATIVE_ASSET
from stableswap.math.fixed_point import MAX_DECIMALS
from stableswap.models.types import Address, is_zero_address, normalize_address

Decimals = Annotated[int, Field(ge=0, le=MAX_DECIMALS)]

# Defaults for from_env(): a native-asset / liquid-staking-token pair
DEFAULT_COINS = f"{NATIVE_ASSET},0xae7ab96520de3a18e5e111b5eaab095312d7fe84"
DEFAULT_DECIMALS = "18,18"
DEFAULT_OWNER = "0x000000000000000000000000000000000000dead"


class PoolConfig(BaseModel):
    """Creation-time configuration of a two-asset stableswap pool.

    Attributes:
        coins: The two asset identifiers, distinct and non-zero
        decimals: Native decimals of each asset (at most 18)
        amplification: Initial amplification coefficient A
        fee: Initial swap fee, scaled by 1e10 (4_000_000 = 0.04%)
        admin_fee: Initial admin fraction of the fee, scaled by 1e10
        owner: Address allowed to run administrative operations
    """

    coins: tuple[Address, Address]
    decimals: tuple[Decimals, Decimals] = (18, 18)
    amplification: int = Field(ge=1, lt=MAX_A)
    fee: int = Field(default=4_000_000, ge=0, le=MAX_FEE)
    admin_fee: int = Field(default=5_000_000_000, ge=0, le=MAX_ADMIN_FEE)
    owner: Address

    model_config = {"frozen": True}

    @field_validator("coins")
    @classmethod
    def _check_coins(cls, coins: tuple[str, str]) -> tuple[str, str]:
        normalized = tuple(normalize_address(coin) for coin in coins)
        for coin in normalized:
            if is_zero_address(coin):
                raise ValueError("Pool assets cannot be the zero address")
        if normalized[0] == normalized[1]:
            raise ValueError(f"Pool assets must be distinct, got {normalized[0]} twice")
        return normalized  # type: ignore[return-value]

    @field_validator("owner")
    @classmethod
    def _check_owner(cls, owner: str) -> str:
        if is_zero_address(owner):
            raise ValueError("Owner cannot be the zero address")
        return normalize_address(owner)

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a config from STABLESWAP_* environment variables.

        - STABLESWAP_COINS: comma-separated asset addresses
        - STABLESWAP_DECIMALS: comma-separated decimals (default: 18,18)
        - STABLESWAP_A: amplification (default: 100)
        - STABLESWAP_FEE: swap fee, 1e10 scale (default: 4000000)
        - STABLESWAP_ADMIN_FEE: admin fraction, 1e10 scale (default: 5000000000)
        - STABLESWAP_OWNER: owner address
        """
        coins = os.environ.get("STABLESWAP_COINS", DEFAULT_COINS).split(",")
        decimals = os.environ.get("STABLESWAP_DECIMALS", DEFAULT_DECIMALS).split(",")
        return cls(
            coins=tuple(c.strip() for c in coins),  # type: ignore[arg-type]
            decimals=tuple(int(d) for d in decimals),  # type: ignore[arg-type]
            amplification=int(os.environ.get("STABLESWAP_A", "100")),
            fee=int(os.environ.get("STABLESWAP_FEE", "4000000")),
            admin_fee=int(os.environ.get("STABLESWAP_ADMIN_FEE", "5000000000")),
            owner=os.environ.get("STABLESWAP_OWNER", DEFAULT_OWNER),
        )
