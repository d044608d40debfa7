"""Quote endpoints for the stableswap pool."""

import os
from functools import lru_cache

import structlog
from fastapi import APIRouter, Depends, HTTPException

from stableswap.constants import NATIVE_ASSET
from stableswap.errors import InvariantViolationError, StableSwapError
from stableswap.models.api import (
    ExchangeQuoteRequest,
    ExchangeQuoteResponse,
    PoolSnapshot,
    TokenAmountQuoteRequest,
    TokenAmountQuoteResponse,
    WithdrawOneCoinQuoteRequest,
    WithdrawOneCoinQuoteResponse,
)
from stableswap.pool import InMemoryShareLedger, InMemoryVault, PoolConfig, StableSwapPool
from stableswap.safe_int import SafeIntError

logger = structlog.get_logger()

router = APIRouter()


def _parse_seed_balances(raw: str) -> list[int]:
    """Parse "a,b" into integer balances; blank means an empty pool."""
    if not raw.strip():
        return []
    return [int(part) for part in raw.split(",")]


@lru_cache(maxsize=1)
def get_default_pool() -> StableSwapPool:
    """Build the served pool from the environment.

    The pool is backed by in-memory collaborators. If
    STABLESWAP_SEED_BALANCES is set (comma-separated native amounts), the
    owner bootstraps it with that deposit.
    """
    config = PoolConfig.from_env()
    vault = InMemoryVault()
    pool = StableSwapPool(config, shares=InMemoryShareLedger(), vault=vault)

    seed = _parse_seed_balances(os.environ.get("STABLESWAP_SEED_BALANCES", ""))
    if seed:
        for coin, amount in zip(config.coins, seed, strict=True):
            vault.fund(config.owner, coin, amount)
        native = sum(a for c, a in zip(config.coins, seed, strict=True) if c == NATIVE_ASSET)
        pool.add_liquidity(seed, 0, sender=config.owner, value=native)

    logger.info(
        "pool_created",
        coins=list(config.coins),
        amplification=config.amplification,
        fee=config.fee,
        seeded=bool(seed),
    )
    return pool


def get_pool() -> StableSwapPool:
    """Dependency provider for the pool instance.

    Override this in tests to inject a prepared pool:
        app.dependency_overrides[get_pool] = lambda: pool
    """
    return get_default_pool()


def _bad_request(operation: str, err: Exception) -> HTTPException:
    logger.warning("quote_rejected", operation=operation, error=str(err))
    return HTTPException(status_code=400, detail=str(err))


@router.get("/pool", response_model=PoolSnapshot)
def pool_snapshot(pool: StableSwapPool = Depends(get_pool)) -> PoolSnapshot:
    """Current balances, parameters and share price."""
    try:
        virtual_price: int | None = pool.get_virtual_price()
    except InvariantViolationError:
        virtual_price = None

    return PoolSnapshot(
        coins=list(pool.coins),
        balances=list(pool.balances),  # type: ignore[arg-type]
        amplification=pool.a(),
        fee=pool.fee,
        admin_fee=pool.admin_fee,
        total_supply=pool.total_supply,  # type: ignore[arg-type]
        virtual_price=virtual_price,  # type: ignore[arg-type]
        is_killed=pool.is_killed,
    )


@router.post("/quote/exchange", response_model=ExchangeQuoteResponse)
def quote_exchange(
    request: ExchangeQuoteRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> ExchangeQuoteResponse:
    """Output of swapping `dx` of asset i for asset j.

    Error Handling:
        - Invalid request schema: 422 (pydantic)
        - Pool rejects the quote (same asset, empty pool, arithmetic fault): 400
    """
    try:
        quote = pool.quote_exchange(request.i, request.j, int(request.dx))
    except (StableSwapError, SafeIntError) as err:
        raise _bad_request("exchange", err) from err

    logger.debug("exchange_quoted", i=request.i, j=request.j, dx=request.dx, dy=quote.dy)
    return ExchangeQuoteResponse(
        dy=quote.dy,  # type: ignore[arg-type]
        fee=quote.fee,  # type: ignore[arg-type]
        admin_fee=quote.admin_fee,  # type: ignore[arg-type]
    )


@router.post("/quote/token-amount", response_model=TokenAmountQuoteResponse)
def quote_token_amount(
    request: TokenAmountQuoteRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> TokenAmountQuoteResponse:
    """Shares minted by a deposit, or burned by a withdrawal, before fees."""
    try:
        shares = pool.calc_token_amount([int(a) for a in request.amounts], request.is_deposit)
    except (StableSwapError, SafeIntError) as err:
        raise _bad_request("token_amount", err) from err
    return TokenAmountQuoteResponse(shares=shares)  # type: ignore[arg-type]


@router.post("/quote/withdraw-one-coin", response_model=WithdrawOneCoinQuoteResponse)
def quote_withdraw_one_coin(
    request: WithdrawOneCoinQuoteRequest,
    pool: StableSwapPool = Depends(get_pool),
) -> WithdrawOneCoinQuoteResponse:
    """Amount of asset i received for burning `share_amount` shares."""
    try:
        dy = pool.calc_withdraw_one_coin(int(request.share_amount), request.i)
    except (StableSwapError, SafeIntError) as err:
        raise _bad_request("withdraw_one_coin", err) from err
    return WithdrawOneCoinQuoteResponse(dy=dy)  # type: ignore[arg-type]
