"""Pydantic models and shared types."""

from stableswap.models.api import (
    ExchangeQuoteRequest,
    ExchangeQuoteResponse,
    PoolSnapshot,
    TokenAmountQuoteRequest,
    TokenAmountQuoteResponse,
    WithdrawOneCoinQuoteRequest,
    WithdrawOneCoinQuoteResponse,
)
from stableswap.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Quote API
    "ExchangeQuoteRequest",
    "ExchangeQuoteResponse",
    "TokenAmountQuoteRequest",
    "TokenAmountQuoteResponse",
    "WithdrawOneCoinQuoteRequest",
    "WithdrawOneCoinQuoteResponse",
    "PoolSnapshot",
]
