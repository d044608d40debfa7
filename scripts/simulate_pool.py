#!/usr/bin/env python3
"""Simulate trading against a two-asset stableswap pool.

Bootstraps a pool with in-memory collaborators, runs a seeded random
sequence of swaps (optionally ramping A halfway through) and prints the
resulting balances, virtual price and accumulated admin fees.

Usage:
    # 1000 swaps on a balanced 1M/1M pool
    python scripts/simulate_pool.py --swaps 1000

    # Ramp A from 100 to 500 halfway through, one swap per hour
    python scripts/simulate_pool.py --amplification 100 --ramp-to 500 --step 3600
"""

import argparse
import logging
import random
import sys
from pathlib import Path

import structlog

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from stableswap.constants import MIN_RAMP_TIME, NATIVE_ASSET  # noqa: E402
from stableswap.errors import StableSwapError  # noqa: E402
from stableswap.math.fixed_point import PRECISION  # noqa: E402
from stableswap.pool import (  # noqa: E402
    InMemoryShareLedger,
    InMemoryVault,
    PoolConfig,
    StableSwapPool,
)
from stableswap.pool.config import DEFAULT_OWNER  # noqa: E402

logger = structlog.get_logger()

STETH = "0xae7ab96520de3a18e5e111b5eaab095312d7fe84"
TRADER = "0x00000000000000000000000000000000000000aa"


class SimulatedClock:
    """Clock the simulation advances explicitly."""

    def __init__(self, start: int) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


def build_pool(
    args: argparse.Namespace, clock: SimulatedClock
) -> tuple[StableSwapPool, InMemoryVault]:
    """Create the pool and have the owner make the initial balanced deposit."""
    config = PoolConfig(
        coins=(NATIVE_ASSET, STETH),
        amplification=args.amplification,
        fee=args.fee,
        admin_fee=args.admin_fee,
        owner=DEFAULT_OWNER,
    )
    vault = InMemoryVault()
    pool = StableSwapPool(config, shares=InMemoryShareLedger(), vault=vault, clock=clock)

    liquidity = args.liquidity * PRECISION
    for coin in config.coins:
        vault.fund(DEFAULT_OWNER, coin, liquidity)
        vault.fund(TRADER, coin, liquidity)
    pool.add_liquidity([liquidity, liquidity], 0, sender=DEFAULT_OWNER, value=liquidity)
    return pool, vault


def run_swaps(
    pool: StableSwapPool,
    clock: SimulatedClock,
    args: argparse.Namespace,
) -> tuple[int, int]:
    """Run the random swap sequence. Returns (executed, rejected)."""
    rng = random.Random(args.seed)
    max_trade = args.liquidity * PRECISION * args.max_trade_bps // 10_000
    executed = rejected = 0

    for n in range(args.swaps):
        if args.ramp_to is not None and n == args.swaps // 2:
            future_time = clock.now + max(args.ramp_duration, MIN_RAMP_TIME)
            pool.ramp_amplification_coefficient(args.ramp_to, future_time, sender=DEFAULT_OWNER)

        i = rng.randrange(2)
        j = 1 - i
        dx = rng.randint(1, max_trade)
        value = dx if pool.coins[i] == NATIVE_ASSET else 0
        try:
            pool.exchange(i, j, dx, 0, sender=TRADER, value=value)
            executed += 1
        except StableSwapError as err:
            logger.debug("swap_rejected", i=i, dx=dx, error=str(err))
            rejected += 1
        clock.advance(args.step)

    return executed, rejected


def main() -> int:
    """Main entry point for the pool simulation."""
    parser = argparse.ArgumentParser(
        description="Simulate random swaps against a two-asset stableswap pool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--swaps", type=int, default=500, help="Number of swaps (default: 500)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument(
        "--liquidity",
        type=int,
        default=1_000_000,
        help="Initial balance of each asset, whole units (default: 1000000)",
    )
    parser.add_argument(
        "--max-trade-bps",
        type=int,
        default=100,
        help="Largest swap as basis points of initial liquidity (default: 100)",
    )
    parser.add_argument("--amplification", type=int, default=100, help="Initial A (default: 100)")
    parser.add_argument("--fee", type=int, default=4_000_000, help="Swap fee, 1e10 scale")
    parser.add_argument(
        "--admin-fee", type=int, default=5_000_000_000, help="Admin fraction, 1e10 scale"
    )
    parser.add_argument(
        "--ramp-to", type=int, default=None, help="Ramp A to this value halfway through"
    )
    parser.add_argument(
        "--ramp-duration",
        type=int,
        default=7 * 86400,
        help="Ramp duration in seconds (default: 1 week, minimum 1 day)",
    )
    parser.add_argument(
        "--step", type=int, default=600, help="Seconds between swaps (default: 600)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    # Pool events are logged at INFO; keep them out of the summary unless asked
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    clock = SimulatedClock(start=1_700_000_000)
    try:
        pool, _ = build_pool(args, clock)
        start_price = pool.get_virtual_price()
        executed, rejected = run_swaps(pool, clock, args)
    except StableSwapError as err:
        logger.error("simulation_failed", error=str(err))
        print(f"Error: {err}")
        return 1

    print("=" * 60)
    print("Stableswap Pool Simulation")
    print("=" * 60)
    print(f"Swaps executed: {executed} (rejected: {rejected})")
    print(f"Final A:        {pool.a()}")
    for k, coin in enumerate(pool.coins):
        print(f"Coin {k} {coin}")
        print(f"  balance:      {pool.balances[k]}")
        print(f"  admin fees:   {pool.admin_balances(k)}")
    end_price = pool.get_virtual_price()
    print(f"Virtual price:  {start_price} -> {end_price}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
