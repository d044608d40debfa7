"""Test helpers module for shared test utilities.

- constants: Asset and account addresses, common amounts
- factories: Pool construction with in-memory collaborators
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    DAI,
    DAY,
    ETH,
    FUNDING,
    INITIAL_LIQUIDITY,
    ONE,
    OWNER,
    PROVIDER,
    START_TIME,
    STETH,
    USDC,
    WETH,
)
from tests.helpers.factories import FakeClock, PoolHarness, make_config, make_pool

__all__ = [
    # Constants
    "WETH",
    "STETH",
    "DAI",
    "USDC",
    "ETH",
    "OWNER",
    "PROVIDER",
    "ALICE",
    "BOB",
    "ONE",
    "INITIAL_LIQUIDITY",
    "FUNDING",
    "START_TIME",
    "DAY",
    # Factories
    "FakeClock",
    "PoolHarness",
    "make_config",
    "make_pool",
]
