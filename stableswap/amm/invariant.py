"""Stableswap invariant math.

Newton-Raphson solvers for the two-asset amplified invariant:

    A * n^n * sum(x_i) + D = A * n^n * D + D^(n+1) / (n^n * prod(x_i))

All inputs are normalized balances (18 decimals). A is the raw
amplification coefficient; the solvers use Ann = A * n.

IMPORTANT: All arithmetic goes through SafeInt, so a zero balance used as a
denominator raises DivisionByZero and a negative intermediate raises
Underflow. Neither is caught here: a degenerate pool has no exchange rate.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from stableswap.errors import InvalidParameterError
from stableswap.math.fixed_point import N_COINS
from stableswap.safe_int import S, SafeInt

logger = structlog.get_logger()

# Maximum iterations for Newton-Raphson convergence
MAX_ITERATIONS = 255


def _check_vector(xp: Sequence[int]) -> None:
    if len(xp) != N_COINS:
        raise InvalidParameterError(f"Expected {N_COINS} balances, got {len(xp)}")
    for k, x in enumerate(xp):
        if x < 0:
            raise InvalidParameterError(f"Balance at index {k} is negative: {x}")


def _check_index(name: str, index: int) -> None:
    if index < 0 or index >= N_COINS:
        raise InvalidParameterError(f"{name} {index} out of range for {N_COINS} coins")


def get_d(xp: Sequence[int], amp: int) -> int:
    """Calculate the invariant D for normalized balances `xp`.

    Algorithm:
        1. Initial guess: D = sum(xp)
        2. D_P = D^(n+1) / (n^n * prod(xp)), accumulated one balance at a time
        3. D = (Ann*S + D_P*n) * D / ((Ann - 1) * D + (n + 1) * D_P)
        4. Stop when |D_new - D_old| <= 1, at most 255 iterations

    Exhausting the iteration cap is not an error: the last estimate is
    returned and a warning is logged.

    Args:
        xp: Normalized balances (18 decimals)
        amp: Amplification coefficient A

    Returns:
        The invariant D, or 0 for an empty pool
    """
    _check_vector(xp)

    sum_xp = S(sum(xp))
    if sum_xp == 0:
        return 0

    d = sum_xp
    ann = S(amp) * N_COINS

    for _ in range(MAX_ITERATIONS):
        d_p = d
        for x in xp:
            d_p = d_p * d // (S(x) * N_COINS)
        d_prev = d

        numerator = (ann * sum_xp + d_p * N_COINS) * d
        denominator = (ann - 1) * d + (N_COINS + 1) * d_p
        d = numerator // denominator

        if d.within(d_prev, 1):
            return d.value

    logger.warning("invariant_did_not_converge", amp=amp, xp=list(xp), d=d.value)
    return d.value


def _newton_y(c: SafeInt, b: SafeInt, d: SafeInt, solver: str) -> int:
    """Solve y^2 + y*(b - D) = c starting from y = D."""
    y = d
    for _ in range(MAX_ITERATIONS):
        y_prev = y
        y = (y * y + c) // (S(2) * y + b - d)
        if y.within(y_prev, 1):
            return y.value

    logger.warning("balance_did_not_converge", solver=solver, d=d.value, y=y.value)
    return y.value


def get_y(i: int, j: int, x: int, xp: Sequence[int], amp: int) -> int:
    """Balance of asset j that keeps D unchanged when asset i's balance becomes x.

    D is computed from the pre-trade vector `xp`.

    Done by solving the quadratic iteratively:
        y^2 + y * (b - D) = c
        b = S' + D / Ann,  c = D^(n+1) / (n^n * P' * Ann)
    where S' and P' run over every asset but j, with x in position i.

    Args:
        i: Index of the asset whose balance is set to x
        j: Index of the asset to solve for
        x: New normalized balance of asset i
        xp: Pre-trade normalized balances
        amp: Amplification coefficient A

    Returns:
        New normalized balance of asset j

    Raises:
        InvalidParameterError: If i == j or either index is out of range
    """
    if i == j:
        raise InvalidParameterError("Cannot swap an asset with itself")
    _check_index("j", j)
    _check_index("i", i)
    _check_vector(xp)

    d = S(get_d(xp, amp))
    ann = S(amp) * N_COINS
    c = d
    sum_others = S.zero()

    for k in range(N_COINS):
        if k == i:
            x_k = x
        elif k != j:
            x_k = xp[k]
        else:
            continue
        sum_others = sum_others + x_k
        c = c * d // (S(x_k) * N_COINS)

    c = c * d // (ann * N_COINS)
    b = sum_others + d // ann
    return _newton_y(c, b, d, "get_y")


def get_y_d(amp: int, i: int, xp: Sequence[int], d: int) -> int:
    """Balance of asset i that brings the invariant to `d`, others held fixed.

    Same quadratic as get_y, but parameterized by the target invariant
    directly. Used by single-coin withdrawal.

    Args:
        amp: Amplification coefficient A
        i: Index of the asset to solve for
        xp: Normalized balances (the value at i is ignored)
        d: Target invariant

    Returns:
        Normalized balance of asset i

    Raises:
        InvalidParameterError: If i is out of range
    """
    _check_index("i", i)
    _check_vector(xp)

    target = S(d)
    ann = S(amp) * N_COINS
    c = target
    sum_others = S.zero()

    for k in range(N_COINS):
        if k == i:
            continue
        sum_others = sum_others + xp[k]
        c = c * target // (S(xp[k]) * N_COINS)

    c = c * target // (ann * N_COINS)
    b = sum_others + target // ann
    return _newton_y(c, b, target, "get_y_d")
