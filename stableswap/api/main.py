"""FastAPI application serving read-only quotes from a stableswap pool."""

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stableswap import __version__
from stableswap.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("STABLESWAP_HOST", "0.0.0.0")
PORT = int(os.environ.get("STABLESWAP_PORT", "8000"))
DEBUG = os.environ.get("STABLESWAP_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB); quote requests are a handful of integers
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="Stableswap Quotes",
    description="Quotes from a two-asset stableswap pool",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the quote API server.

    Configuration via environment variables:
    - STABLESWAP_HOST: Host to bind to (default: 0.0.0.0)
    - STABLESWAP_PORT: Port to bind to (default: 8000)
    - STABLESWAP_DEBUG: Enable debug/reload mode (default: false)

    The pool itself is configured through the STABLESWAP_* variables read by
    PoolConfig.from_env() and STABLESWAP_SEED_BALANCES.
    """
    uvicorn.run(
        "stableswap.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
