"""Pytest configuration and fixtures."""

import pytest

from tests.helpers import (
    ALICE,
    BOB,
    INITIAL_LIQUIDITY,
    OWNER,
    PROVIDER,
    PoolHarness,
    make_pool,
)


@pytest.fixture
def harness() -> PoolHarness:
    """Empty WETH/stETH pool (A=100, 0.04% fee, 50% admin fee) with funded accounts."""
    h = make_pool()
    for account in (OWNER, PROVIDER, ALICE, BOB):
        h.fund(account)
    return h


@pytest.fixture
def seeded(harness: PoolHarness) -> PoolHarness:
    """The same pool after PROVIDER deposits 1000 of each asset."""
    harness.deposit(PROVIDER, [INITIAL_LIQUIDITY, INITIAL_LIQUIDITY])
    return harness
