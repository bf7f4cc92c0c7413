"""Quoting LP token burns."""

from __future__ import annotations

from collections.abc import Sequence

from quoter.amm.formulas import share_of_pool_removed, withdrawal_amounts
from quoter.batch import ITEM_ERRORS, gather_lenient
from quoter.constants import REMOVAL_PERCENTAGES
from quoter.errors import (
    InsufficientLiquidityError,
    InvalidAmountsError,
    ZeroLiquidityError,
    classify_errors,
)
from quoter.models.pool import Pool
from quoter.models.quotes import RemovalQuery, RemovalQuote
from quoter.pools.store import PoolStore


def _check_liquidity(liquidity_tokens: int) -> None:
    if (
        isinstance(liquidity_tokens, bool)
        or not isinstance(liquidity_tokens, int)
        or liquidity_tokens <= 0
    ):
        raise InvalidAmountsError(
            "Liquidity tokens must be a positive integer", {"liquidity_tokens": liquidity_tokens}
        )


def quote_removal(pool: Pool, liquidity_tokens: int, percentage: int | None = None) -> RemovalQuote:
    """Compute a removal quote from a pool snapshot.

    Raises:
        InvalidAmountsError: liquidity_tokens not positive, or the burn is too
            small to return any of one token
        ZeroLiquidityError: the pool has no LP supply
        InsufficientLiquidityError: burning more than the total supply
    """
    _check_liquidity(liquidity_tokens)
    supply = pool.lp_token_total_supply
    if supply == 0:
        raise ZeroLiquidityError("Pool has no liquidity", {"pool_id": pool.id})
    if liquidity_tokens > supply:
        raise InsufficientLiquidityError(
            "Insufficient liquidity tokens",
            {"pool_id": pool.id, "liquidity_tokens": liquidity_tokens, "total_supply": supply},
        )

    amount0, amount1 = withdrawal_amounts(liquidity_tokens, pool.reserve0, pool.reserve1, supply)
    if amount0 == 0 or amount1 == 0:
        raise InvalidAmountsError(
            "Removal amount too small",
            {"pool_id": pool.id, "liquidity_tokens": liquidity_tokens},
        )

    return RemovalQuote(
        pool_id=pool.id,
        token0_amount=amount0,
        token1_amount=amount1,
        share_of_pool=share_of_pool_removed(liquidity_tokens, supply),
        percentage=percentage,
    )


class RemovalQuoter:
    """Quotes the token amounts returned for burning LP tokens."""

    def __init__(self, store: PoolStore) -> None:
        self.store = store

    @classify_errors("Failed to get remove liquidity quote")
    async def get_remove_liquidity_quote(self, pool_id: str, liquidity_tokens: int) -> RemovalQuote:
        _check_liquidity(liquidity_tokens)
        pool = await self.store.get_pool_by_id(pool_id)
        return quote_removal(pool, liquidity_tokens)

    @classify_errors("Failed to get remove liquidity range quotes")
    async def get_remove_liquidity_range_quotes(
        self, pool_id: str, total_liquidity: int
    ) -> list[RemovalQuote]:
        """Quotes for burning 25%, 50%, 75% and 100% of ``total_liquidity``.

        All four are computed from one pool snapshot.
        """
        _check_liquidity(total_liquidity)
        pool = await self.store.get_pool_by_id(pool_id)
        return [
            quote_removal(pool, total_liquidity * pct // 100, percentage=pct)
            for pct in REMOVAL_PERCENTAGES
        ]

    @classify_errors("Failed to get batch remove liquidity quotes")
    async def batch_get_remove_liquidity_quotes(
        self, queries: Sequence[RemovalQuery]
    ) -> list[RemovalQuote]:
        """Quote many removals concurrently; failed items are logged and omitted."""
        return await gather_lenient(
            (self.get_remove_liquidity_quote(q.pool_id, q.liquidity_tokens) for q in queries),
            keys=[q.pool_id for q in queries],
            tolerated=ITEM_ERRORS,
            event="removal_quote_skipped",
        )
