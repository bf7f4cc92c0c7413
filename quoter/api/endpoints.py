"""API endpoints for pool lookups and quotes."""

import structlog
from fastapi import APIRouter, Depends

from quoter.api.schemas import (
    BatchQuoteRequest,
    BatchQuoteResponse,
    ErrorResponse,
    LiquidityBatchRequest,
    LiquidityBatchResponse,
    LiquidityQuoteRequest,
    LiquidityQuoteResponse,
    LiquidityTokensRequest,
    LiquidityTokensResponse,
    MultiHopQuoteRequest,
    PoolBatchRequest,
    PoolBatchResponse,
    PoolCountResponse,
    PoolResponse,
    RemovalBatchRequest,
    RemovalQuoteRequest,
    RemovalQuoteResponse,
    RemovalQuotesResponse,
    SwapQuoteRequest,
    SwapQuoteResponse,
)
from quoter.models import LiquidityQuery, RemovalQuery, SwapQuery
from quoter.service import DexReadService, get_default_service

logger = structlog.get_logger()

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Invalid amounts, path or minimums"},
        404: {"model": ErrorResponse, "description": "Pool not found"},
        409: {"model": ErrorResponse, "description": "Insufficient or zero liquidity"},
        502: {"model": ErrorResponse, "description": "Chain node unavailable or call failed"},
    }
)


def get_service() -> DexReadService:
    """Dependency provider for the read service.

    Override this in tests to inject a service backed by a fake chain:
        app.dependency_overrides[get_service] = lambda: service
    """
    return get_default_service()


# --- Pools ---


@router.get("/pools/count")
async def pool_count(service: DexReadService = Depends(get_service)) -> PoolCountResponse:
    return PoolCountResponse(count=await service.get_number_of_pools())


@router.get("/pools/{pool_id}")
async def pool_by_id(
    pool_id: str, service: DexReadService = Depends(get_service)
) -> PoolResponse:
    return PoolResponse.from_pool(await service.get_pool_by_id(pool_id))


@router.get("/pools")
async def pool_by_pair(
    token0: str, token1: str, service: DexReadService = Depends(get_service)
) -> PoolResponse:
    return PoolResponse.from_pool(await service.get_pool(token0, token1))


@router.post("/pools/batch")
async def pools_batch(
    request: PoolBatchRequest, service: DexReadService = Depends(get_service)
) -> PoolBatchResponse:
    """Look up many pools. Pairs or ids without a pool are left out of the result."""
    pools = []
    if request.pairs:
        pools.extend(await service.get_pools([(p.token0, p.token1) for p in request.pairs]))
    if request.pool_ids:
        pools.extend(await service.get_pools_by_id(request.pool_ids))
    logger.info(
        "pools_batch",
        requested=len(request.pairs) + len(request.pool_ids),
        found=len(pools),
    )
    return PoolBatchResponse(pools=[PoolResponse.from_pool(p) for p in pools])


# --- Swaps ---


@router.post("/quotes/swap")
async def swap_quote(
    request: SwapQuoteRequest, service: DexReadService = Depends(get_service)
) -> SwapQuoteResponse:
    amount = int(request.amount)
    if request.exact_output:
        quote = await service.get_swap_quote_for_exact_output(
            request.token_in, request.token_out, amount
        )
    else:
        quote = await service.get_swap_quote(request.token_in, request.token_out, amount)
    return SwapQuoteResponse.from_quote(quote)


@router.post("/quotes/multihop")
async def multihop_quote(
    request: MultiHopQuoteRequest, service: DexReadService = Depends(get_service)
) -> SwapQuoteResponse:
    amount = int(request.amount)
    if request.exact_output:
        quote = await service.get_multi_hop_quote_for_exact_output(request.path, amount)
    else:
        quote = await service.get_multi_hop_quote(request.path, amount)
    return SwapQuoteResponse.from_quote(quote)


@router.post("/quotes/batch")
async def batch_quotes(
    request: BatchQuoteRequest, service: DexReadService = Depends(get_service)
) -> BatchQuoteResponse:
    """Quote several routes. Fails as a whole if any route fails."""
    queries = [SwapQuery(path=tuple(q.path), amount_in=int(q.amount_in)) for q in request.queries]
    quotes = await service.batch_get_quotes(queries)
    return BatchQuoteResponse(quotes=[SwapQuoteResponse.from_quote(q) for q in quotes])


# --- Liquidity ---


@router.post("/quotes/liquidity")
async def liquidity_quote(
    request: LiquidityQuoteRequest, service: DexReadService = Depends(get_service)
) -> LiquidityQuoteResponse:
    quote = await service.get_liquidity_quote(
        request.pool_id,
        int(request.amount0_desired),
        int(request.amount1_desired),
        int(request.amount0_min),
        int(request.amount1_min),
    )
    return LiquidityQuoteResponse.from_quote(quote)


@router.post("/quotes/liquidity/tokens")
async def liquidity_tokens(
    request: LiquidityTokensRequest, service: DexReadService = Depends(get_service)
) -> LiquidityTokensResponse:
    minted = await service.calculate_liquidity_tokens(
        request.pool_id, int(request.amount0), int(request.amount1)
    )
    return LiquidityTokensResponse(pool_id=request.pool_id, liquidity_tokens=minted)


@router.post("/quotes/liquidity/batch")
async def liquidity_batch(
    request: LiquidityBatchRequest, service: DexReadService = Depends(get_service)
) -> LiquidityBatchResponse:
    """Quote several deposits. Items that fail are left out of the result."""
    queries = [
        LiquidityQuery(
            pool_id=q.pool_id,
            amount0_desired=int(q.amount0_desired),
            amount1_desired=int(q.amount1_desired),
            amount0_min=int(q.amount0_min),
            amount1_min=int(q.amount1_min),
        )
        for q in request.queries
    ]
    quotes = await service.batch_get_liquidity_quotes(queries)
    return LiquidityBatchResponse(quotes=[LiquidityQuoteResponse.from_quote(q) for q in quotes])


# --- Removal ---


@router.post("/quotes/removal")
async def removal_quote(
    request: RemovalQuoteRequest, service: DexReadService = Depends(get_service)
) -> RemovalQuoteResponse | RemovalQuotesResponse:
    """Quote burning LP tokens, or a 25/50/75/100% ladder when ``range`` is set."""
    liquidity = int(request.liquidity_tokens)
    if request.range:
        quotes = await service.get_remove_liquidity_range_quotes(request.pool_id, liquidity)
        return RemovalQuotesResponse(quotes=[RemovalQuoteResponse.from_quote(q) for q in quotes])
    quote = await service.get_remove_liquidity_quote(request.pool_id, liquidity)
    return RemovalQuoteResponse.from_quote(quote)


@router.post("/quotes/removal/batch")
async def removal_batch(
    request: RemovalBatchRequest, service: DexReadService = Depends(get_service)
) -> RemovalQuotesResponse:
    """Quote several removals. Items that fail are left out of the result."""
    queries = [
        RemovalQuery(pool_id=q.pool_id, liquidity_tokens=int(q.liquidity_tokens))
        for q in request.queries
    ]
    quotes = await service.batch_get_remove_liquidity_quotes(queries)
    return RemovalQuotesResponse(quotes=[RemovalQuoteResponse.from_quote(q) for q in quotes])
