"""Request and response models for the HTTP API.

Field names are camelCase on the wire; amounts are decimal strings.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from quoter.models import (
    ContractPrincipal,
    Fee,
    LiquidityQuote,
    Pool,
    RemovalQuote,
    SwapQuote,
    Uint128,
)

_ALIASES = {"populate_by_name": True}


# --- Pools ---


class FeeModel(BaseModel):
    numerator: int = Field(ge=0)
    denominator: int = Field(gt=0)

    @classmethod
    def from_fee(cls, fee: Fee | None) -> FeeModel | None:
        if fee is None:
            return None
        return cls(numerator=fee.numerator, denominator=fee.denominator)


class PoolResponse(BaseModel):
    """Snapshot of a pool's on-chain state."""

    id: str
    token0: str
    token1: str
    reserve0: Uint128
    reserve1: Uint128
    lp_token: str = Field(alias="lpToken")
    total_supply: Uint128 = Field(alias="totalSupply")
    swap_fee: FeeModel = Field(alias="swapFee")
    protocol_fee: FeeModel | None = Field(default=None, alias="protocolFee")
    share_fee: FeeModel | None = Field(default=None, alias="shareFee")

    model_config = _ALIASES

    @classmethod
    def from_pool(cls, pool: Pool) -> PoolResponse:
        return cls(
            id=pool.id,
            token0=pool.token0,
            token1=pool.token1,
            reserve0=pool.reserve0,
            reserve1=pool.reserve1,
            lp_token=pool.lp_token,
            total_supply=pool.lp_token_total_supply,
            swap_fee=FeeModel(
                numerator=pool.swap_fee.numerator, denominator=pool.swap_fee.denominator
            ),
            protocol_fee=FeeModel.from_fee(pool.protocol_fee),
            share_fee=FeeModel.from_fee(pool.share_fee),
        )


class PoolCountResponse(BaseModel):
    count: int


class TokenPair(BaseModel):
    token0: ContractPrincipal
    token1: ContractPrincipal


class PoolBatchRequest(BaseModel):
    """Pools to look up, by token pair and/or by id. Unknown pools are omitted."""

    pairs: list[TokenPair] = Field(default_factory=list)
    pool_ids: list[str] = Field(default_factory=list, alias="poolIds")

    model_config = _ALIASES


class PoolBatchResponse(BaseModel):
    pools: list[PoolResponse]


# --- Swaps ---


class SwapQuoteRequest(BaseModel):
    """Single-hop quote. ``amount`` is the input, or the output when exactOutput is set."""

    token_in: ContractPrincipal = Field(alias="tokenIn")
    token_out: ContractPrincipal = Field(alias="tokenOut")
    amount: Uint128
    exact_output: bool = Field(default=False, alias="exactOutput")

    model_config = _ALIASES


class MultiHopQuoteRequest(BaseModel):
    path: list[ContractPrincipal]
    amount: Uint128
    exact_output: bool = Field(default=False, alias="exactOutput")

    model_config = _ALIASES


class BatchQuoteItem(BaseModel):
    path: list[ContractPrincipal]
    amount_in: Uint128 = Field(alias="amountIn")

    model_config = _ALIASES


class BatchQuoteRequest(BaseModel):
    queries: list[BatchQuoteItem]


class SwapQuoteResponse(BaseModel):
    route: list[str]
    amount_in: Uint128 = Field(alias="amountIn")
    amount_out: Uint128 = Field(alias="amountOut")
    price_impact: float = Field(alias="priceImpact")

    model_config = _ALIASES

    @classmethod
    def from_quote(cls, quote: SwapQuote) -> SwapQuoteResponse:
        return cls(
            route=list(quote.route),
            amount_in=quote.amount_in,
            amount_out=quote.amount_out,
            price_impact=quote.price_impact,
        )


class BatchQuoteResponse(BaseModel):
    quotes: list[SwapQuoteResponse]


# --- Liquidity ---


class LiquidityQuoteRequest(BaseModel):
    pool_id: str = Field(alias="poolId")
    amount0_desired: Uint128 = Field(alias="amount0Desired")
    amount1_desired: Uint128 = Field(alias="amount1Desired")
    amount0_min: Uint128 = Field(default="0", alias="amount0Min")
    amount1_min: Uint128 = Field(default="0", alias="amount1Min")

    model_config = _ALIASES


class LiquidityBatchRequest(BaseModel):
    queries: list[LiquidityQuoteRequest]


class LiquidityQuoteResponse(BaseModel):
    pool_id: str = Field(alias="poolId")
    token0_amount: Uint128 = Field(alias="token0Amount")
    token1_amount: Uint128 = Field(alias="token1Amount")
    liquidity_tokens: Uint128 = Field(alias="liquidityTokens")
    share_of_pool: float = Field(alias="shareOfPool")
    price_impact: float = Field(alias="priceImpact")

    model_config = _ALIASES

    @classmethod
    def from_quote(cls, quote: LiquidityQuote) -> LiquidityQuoteResponse:
        return cls(
            pool_id=quote.pool_id,
            token0_amount=quote.token0_amount,
            token1_amount=quote.token1_amount,
            liquidity_tokens=quote.liquidity_tokens,
            share_of_pool=quote.share_of_pool,
            price_impact=quote.price_impact,
        )


class LiquidityBatchResponse(BaseModel):
    quotes: list[LiquidityQuoteResponse]


class LiquidityTokensRequest(BaseModel):
    pool_id: str = Field(alias="poolId")
    amount0: Uint128
    amount1: Uint128

    model_config = _ALIASES


class LiquidityTokensResponse(BaseModel):
    pool_id: str = Field(alias="poolId")
    liquidity_tokens: Uint128 = Field(alias="liquidityTokens")

    model_config = _ALIASES


# --- Removal ---


class RemovalQuoteRequest(BaseModel):
    """Removal quote; with ``range`` set, liquidityTokens is the position size."""

    pool_id: str = Field(alias="poolId")
    liquidity_tokens: Uint128 = Field(alias="liquidityTokens")
    range: bool = False

    model_config = _ALIASES


class RemovalBatchItem(BaseModel):
    pool_id: str = Field(alias="poolId")
    liquidity_tokens: Uint128 = Field(alias="liquidityTokens")

    model_config = _ALIASES


class RemovalBatchRequest(BaseModel):
    queries: list[RemovalBatchItem]


class RemovalQuoteResponse(BaseModel):
    pool_id: str = Field(alias="poolId")
    token0_amount: Uint128 = Field(alias="token0Amount")
    token1_amount: Uint128 = Field(alias="token1Amount")
    share_of_pool: float = Field(alias="shareOfPool")
    percentage: int | None = None

    model_config = _ALIASES

    @classmethod
    def from_quote(cls, quote: RemovalQuote) -> RemovalQuoteResponse:
        return cls(
            pool_id=quote.pool_id,
            token0_amount=quote.token0_amount,
            token1_amount=quote.token1_amount,
            share_of_pool=quote.share_of_pool,
            percentage=quote.percentage,
        )


class RemovalQuotesResponse(BaseModel):
    quotes: list[RemovalQuoteResponse]


class ErrorBody(BaseModel):
    code: str
    message: str
    details: dict[str, object] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: ErrorBody
