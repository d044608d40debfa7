"""Integer fixed-point math for the stableswap engine."""

from stableswap.math.fixed_point import (
    FEE_DENOMINATOR,
    MAX_DECIMALS,
    N_COINS,
    PRECISION,
    denormalize,
    mul_div,
    normalize,
    precision_multiplier,
    rate_for,
    xp,
)

__all__ = [
    "PRECISION",
    "FEE_DENOMINATOR",
    "MAX_DECIMALS",
    "N_COINS",
    "mul_div",
    "precision_multiplier",
    "rate_for",
    "normalize",
    "denormalize",
    "xp",
]
