"""Fixed-point helpers for the stableswap engine.

Asset quantities are normalized to 18 decimals (PRECISION) before entering
the solvers; fee fractions are scaled by FEE_DENOMINATOR (1e10). All
divisions truncate toward zero on non-negative operands, matching the
on-chain pool exactly.
"""

from __future__ import annotations

from collections.abc import Sequence

from stableswap.errors import InvalidParameterError
from stableswap.safe_int import S, Underflow

__all__ = [
    # Constants
    "PRECISION",
    "FEE_DENOMINATOR",
    "MAX_DECIMALS",
    "N_COINS",
    # Functions
    "mul_div",
    "precision_multiplier",
    "rate_for",
    "normalize",
    "denormalize",
    "xp",
]

# =============================================================================
# Constants
# =============================================================================

PRECISION = 10**18
FEE_DENOMINATOR = 10**10

# Assets with more decimals than this cannot be normalized without loss
MAX_DECIMALS = 18

# Pools hold exactly two assets
N_COINS = 2


# =============================================================================
# Scaled arithmetic
# =============================================================================


def mul_div(a: int, b: int, c: int) -> int:
    """Compute (a * b) // c with truncation.

    The product is exact (Python integers are unbounded), so this is the
    widened multiply-then-divide primitive every component relies on.

    Raises:
        Underflow: If any operand is negative
        DivisionByZero: If c is zero
    """
    if a < 0 or b < 0 or c < 0:
        raise Underflow(f"mul_div operands must be non-negative: ({a} * {b}) // {c}")
    return (S(a) * S(b) // S(c)).value


def precision_multiplier(decimals: int) -> int:
    """Factor that lifts an amount with `decimals` decimals to 18 decimals.

    Raises:
        InvalidParameterError: If decimals is outside [0, MAX_DECIMALS]
    """
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise InvalidParameterError(
            f"Asset decimals must be in [0, {MAX_DECIMALS}], got {decimals}"
        )
    return 10 ** (MAX_DECIMALS - decimals)


def rate_for(decimals: int) -> int:
    """Rate from native units to normalized units: PRECISION * multiplier."""
    return PRECISION * precision_multiplier(decimals)


def normalize(amount: int, rate: int) -> int:
    """Native amount -> 18-decimal normalized amount."""
    return mul_div(amount, rate, PRECISION)


def denormalize(value: int, rate: int) -> int:
    """Normalized amount -> native amount, rounding down."""
    return mul_div(value, PRECISION, rate)


def xp(balances: Sequence[int], rates: Sequence[int]) -> list[int]:
    """Normalized balance vector: xp[i] = balances[i] * rates[i] / PRECISION."""
    return [normalize(balance, rate) for balance, rate in zip(balances, rates, strict=True)]
