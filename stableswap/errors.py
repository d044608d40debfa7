"""Stableswap pool error classes.

Grouped by how a caller can react:
- InvalidParameterError: the request itself is malformed, rejected before
  any state is read
- InvariantViolationError: the pool cannot honour the request at all
- SlippageError: realized amounts crossed the caller's bound; retry with
  adjusted bounds
- LifecycleError: the pool is killed or an admin delay has not elapsed

Arithmetic faults (zero denominators, unsigned underflow) are raised as
stableswap.safe_int.SafeIntError and are not part of this hierarchy.
"""


class StableSwapError(Exception):
    """Base error for stableswap pool operations."""

    pass


class InvalidParameterError(StableSwapError):
    """Invalid index, amount vector, address, fee or amplification value."""

    pass


class InvariantViolationError(StableSwapError):
    """Operation would break a pool invariant (e.g. deposit not raising D)."""

    pass


class SlippageError(StableSwapError):
    """Realized output below minimum or burned shares above maximum."""

    pass


class LifecycleError(StableSwapError):
    """Operation not permitted in the pool's current lifecycle state."""

    pass


class PoolKilledError(LifecycleError):
    """Pool is killed; only balanced withdrawal is permitted."""

    pass


class AdminActionNotReadyError(LifecycleError):
    """Admin action attempted before its delay elapsed, or nothing pending."""

    pass


class AdminActionPendingError(LifecycleError):
    """Another admin change is already pending."""

    pass


class RampNotAllowedError(LifecycleError):
    """Amplification ramp attempted during the cooldown window."""

    pass


class KillDeadlinePassedError(LifecycleError):
    """Pool can no longer be killed."""

    pass


class UnauthorizedError(StableSwapError):
    """Caller is not allowed to perform an administrative operation."""

    pass


class ReentrancyError(StableSwapError):
    """Nested pool operation while another one is still running."""

    pass


class InsufficientBalanceError(StableSwapError):
    """Account holds fewer shares or assets than the operation needs."""

    pass
