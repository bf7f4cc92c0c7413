"""Quoting deposits into a pool."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from quoter.amm.base import PoolMath
from quoter.amm.formulas import (
    liquidity_price_impact,
    mint_amount,
    share_of_pool_after_mint,
)
from quoter.batch import ITEM_ERRORS, gather_lenient
from quoter.errors import (
    InsufficientLiquidityError,
    InvalidAmountsError,
    MinimumNotMetError,
    classify_errors,
)
from quoter.models.pool import Pool
from quoter.models.quotes import LiquidityQuery, LiquidityQuote
from quoter.pools.store import PoolStore

logger = structlog.get_logger()


def _is_amount(value: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_deposit(
    amount0_desired: int, amount1_desired: int, amount0_min: int, amount1_min: int
) -> None:
    amounts = (amount0_desired, amount1_desired, amount0_min, amount1_min)
    if (
        not all(_is_amount(a) for a in amounts)
        or amount0_desired <= 0
        or amount1_desired <= 0
        or amount0_min < 0
        or amount1_min < 0
    ):
        raise InvalidAmountsError(
            "Invalid amounts",
            {
                "amount0_desired": amount0_desired,
                "amount1_desired": amount1_desired,
                "amount0_min": amount0_min,
                "amount1_min": amount1_min,
            },
        )


def _minted(pool: Pool, amount0: int, amount1: int) -> int:
    if not pool.is_empty and (pool.reserve0 == 0 or pool.reserve1 == 0):
        raise InsufficientLiquidityError(
            "Pool has supply but an empty reserve",
            {"pool_id": pool.id, "reserve0": pool.reserve0, "reserve1": pool.reserve1},
        )
    return mint_amount(
        amount0, amount1, pool.reserve0, pool.reserve1, pool.lp_token_total_supply
    )


class LiquidityQuoter:
    """Quotes deposits: optimal amounts, LP tokens minted, resulting share."""

    def __init__(self, store: PoolStore, math: PoolMath) -> None:
        self.store = store
        self.math = math

    @classify_errors("Failed to get liquidity quote")
    async def get_liquidity_quote(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
    ) -> LiquidityQuote:
        """Quote a deposit at the pool's current ratio.

        The router may scale one side down to match the reserve ratio; the
        quote reports the amounts actually deposited. Minting, share and price
        impact are all computed from the same pool snapshot.

        Raises:
            InvalidAmountsError: desired amounts not positive, minimums negative,
                or the deposit too small to mint anything
            MinimumNotMetError: an optimal amount falls below its minimum
            PoolNotFoundError: the pool does not exist
        """
        _validate_deposit(amount0_desired, amount1_desired, amount0_min, amount1_min)
        pool = await self.store.get_pool_by_id(pool_id)

        amount0, amount1 = await self.math.add_liquidity_calc(
            pool.id, amount0_desired, amount1_desired, amount0_min, amount1_min
        )
        if amount0 < amount0_min or amount1 < amount1_min:
            raise MinimumNotMetError(
                "Calculated amounts below minimum",
                {
                    "pool_id": pool.id,
                    "optimal_amount0": amount0,
                    "optimal_amount1": amount1,
                    "amount0_min": amount0_min,
                    "amount1_min": amount1_min,
                },
            )

        liquidity = _minted(pool, amount0, amount1)
        if liquidity == 0:
            raise InvalidAmountsError(
                "Deposit too small to mint liquidity tokens",
                {"pool_id": pool.id, "amount0": amount0, "amount1": amount1},
            )

        logger.debug(
            "liquidity_quoted",
            pool_id=pool.id,
            amount0=amount0,
            amount1=amount1,
            liquidity_tokens=liquidity,
        )
        return LiquidityQuote(
            pool_id=pool.id,
            token0_amount=amount0,
            token1_amount=amount1,
            liquidity_tokens=liquidity,
            share_of_pool=share_of_pool_after_mint(liquidity, pool.lp_token_total_supply),
            price_impact=liquidity_price_impact(amount0, amount1, pool.reserve0, pool.reserve1),
        )

    @classify_errors("Failed to calculate liquidity tokens")
    async def calculate_liquidity_tokens(self, pool_id: str, amount0: int, amount1: int) -> int:
        """LP tokens minted for depositing exactly amount0/amount1.

        First deposit: isqrt(amount0 * amount1). Otherwise the smaller of the
        two proportional contributions.
        """
        if not (_is_amount(amount0) and _is_amount(amount1)) or amount0 < 0 or amount1 < 0:
            raise InvalidAmountsError(
                "Amounts must be non-negative integers", {"amount0": amount0, "amount1": amount1}
            )
        pool = await self.store.get_pool_by_id(pool_id)
        return _minted(pool, amount0, amount1)

    @classify_errors("Failed to get batch liquidity quotes")
    async def batch_get_liquidity_quotes(
        self, queries: Sequence[LiquidityQuery]
    ) -> list[LiquidityQuote]:
        """Quote many deposits concurrently; failed items are logged and omitted."""
        return await gather_lenient(
            (
                self.get_liquidity_quote(
                    q.pool_id, q.amount0_desired, q.amount1_desired, q.amount0_min, q.amount1_min
                )
                for q in queries
            ),
            keys=[q.pool_id for q in queries],
            tolerated=ITEM_ERRORS,
            event="liquidity_quote_skipped",
        )
