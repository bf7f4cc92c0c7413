"""FastAPI application exposing the DEX read service.

Note: Rate limiting is not implemented at the application level. It belongs
at the infrastructure layer (reverse proxy / load balancer).
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from quoter import __version__
from quoter.api.endpoints import router
from quoter.errors import DexErrorCode, DexReadError
from quoter.logging_config import configure_logging
from quoter.service import close_default_service

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("QUOTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("QUOTER_PORT", "8000"))
DEBUG = os.environ.get("QUOTER_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("QUOTER_LOG_LEVEL", "INFO")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

ERROR_STATUS = {
    DexErrorCode.POOL_NOT_FOUND: 404,
    DexErrorCode.INVALID_AMOUNTS: 400,
    DexErrorCode.INVALID_PATH: 400,
    DexErrorCode.MINIMUM_NOT_MET: 400,
    DexErrorCode.INSUFFICIENT_LIQUIDITY: 409,
    DexErrorCode.ZERO_LIQUIDITY: 409,
    DexErrorCode.CONTRACT_ERROR: 502,
    DexErrorCode.NETWORK_ERROR: 502,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await close_default_service()


app = FastAPI(
    title="DEX Quoter",
    description="Read-only pool state and quotes for constant-product pools on Stacks",
    version=__version__,
    lifespan=lifespan,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(DexReadError)
async def dex_error_handler(request: Request, exc: DexReadError) -> JSONResponse:
    status = ERROR_STATUS.get(exc.code, 500)
    log = logger.warning if status >= 500 else logger.info
    log(
        "request_failed",
        path=request.url.path,
        code=exc.code.value,
        error=exc.message,
    )
    return JSONResponse(status_code=status, content={"error": exc.to_dict()})


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - QUOTER_HOST: Host to bind to (default: 0.0.0.0)
    - QUOTER_PORT: Port to bind to (default: 8000)
    - QUOTER_DEBUG: Enable debug/reload mode (default: false)
    - QUOTER_LOG_LEVEL: Minimum log level (default: INFO)
    """
    configure_logging(LOG_LEVEL)
    uvicorn.run(
        "quoter.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
