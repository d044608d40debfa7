"""Stateful pool: configuration, collaborators, events and the pool itself."""

from stableswap.pool.collaborators import (
    AccessControl,
    AssetVault,
    Clock,
    InMemoryShareLedger,
    InMemoryVault,
    NativeTransfer,
    OwnerAccessControl,
    ShareLedger,
    system_clock,
)
from stableswap.pool.config import PoolConfig
from stableswap.pool.events import PoolEvent
from stableswap.pool.pool import PoolState, StableSwapPool, SwapQuote

__all__ = [
    # Pool
    "StableSwapPool",
    "PoolState",
    "SwapQuote",
    "PoolConfig",
    "PoolEvent",
    # Collaborator interfaces
    "ShareLedger",
    "AssetVault",
    "AccessControl",
    "Clock",
    "system_clock",
    # In-memory collaborators
    "InMemoryShareLedger",
    "InMemoryVault",
    "NativeTransfer",
    "OwnerAccessControl",
]
