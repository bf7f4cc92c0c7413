"""Quote value objects returned by the quoting services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SwapQuote:
    """Result of quoting a swap along a route.

    price_impact is an absolute percentage. For multi-hop routes it is the sum
    of the per-hop impacts, not their compounded product.
    """

    route: tuple[str, ...]
    amount_in: int
    amount_out: int
    price_impact: float


@dataclass(frozen=True)
class LiquidityQuote:
    """Amounts actually deposited and LP tokens minted for a deposit."""

    pool_id: str
    token0_amount: int
    token1_amount: int
    liquidity_tokens: int
    # Percentage of the pool owned by the new LP tokens after minting
    share_of_pool: float
    price_impact: float


@dataclass(frozen=True)
class RemovalQuote:
    """Amounts returned when burning LP tokens."""

    pool_id: str
    token0_amount: int
    token1_amount: int
    # Percentage of the total supply being burned
    share_of_pool: float
    # Requested fraction when generated as part of a range
    percentage: int | None = None


@dataclass(frozen=True)
class SwapQuery:
    """One item of a batch swap request."""

    path: tuple[str, ...]
    amount_in: int


@dataclass(frozen=True)
class LiquidityQuery:
    """One item of a batch deposit request."""

    pool_id: str
    amount0_desired: int
    amount1_desired: int
    amount0_min: int = 0
    amount1_min: int = 0


@dataclass(frozen=True)
class RemovalQuery:
    """One item of a batch removal request."""

    pool_id: str
    liquidity_tokens: int
