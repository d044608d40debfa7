"""Two-asset stableswap invariant engine."""

from stableswap.pool import PoolConfig, StableSwapPool

__version__ = "0.1.0"
__all__ = ["StableSwapPool", "PoolConfig", "__version__"]
