"""Stableswap curve math: amplification schedule, invariant solvers, fees.

Everything here is pure and stateless apart from the two small mutable
records (AmplificationRamp, FeeSchedule) that the pool owns.
"""

from .amplification import AmplificationRamp
from .fees import (
    FeeSchedule,
    ImbalanceFees,
    PendingFeeChange,
    admin_share,
    apply_imbalance_fees,
    imbalance_fee_rate,
    swap_fee,
    validate_fees,
)
from .invariant import MAX_ITERATIONS, get_d, get_y, get_y_d

__all__ = [
    # Amplification
    "AmplificationRamp",
    # Invariant solvers
    "MAX_ITERATIONS",
    "get_d",
    "get_y",
    "get_y_d",
    # Fees
    "FeeSchedule",
    "PendingFeeChange",
    "ImbalanceFees",
    "swap_fee",
    "admin_share",
    "imbalance_fee_rate",
    "apply_imbalance_fees",
    "validate_fees",
]
