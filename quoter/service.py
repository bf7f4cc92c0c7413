"""DexReadService: one object exposing every read operation.

Wires a ChainQuery into the pool store and the three quoters. Library users
who only need one part can construct the components directly.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from quoter.amm.onchain import OnChainMath
from quoter.chain.client import ChainQuery, build_chain_query
from quoter.config import DEFAULT_CONFIG, QuoterConfig
from quoter.liquidity.add import LiquidityQuoter
from quoter.liquidity.remove import RemovalQuoter
from quoter.models.pool import Pool
from quoter.models.quotes import (
    LiquidityQuery,
    LiquidityQuote,
    RemovalQuery,
    RemovalQuote,
    SwapQuery,
    SwapQuote,
)
from quoter.pools.store import PoolStore
from quoter.routing.swap import SwapQuoter

logger = structlog.get_logger()


class DexReadService:
    """Reads DEX pool state and quotes swaps and liquidity operations."""

    def __init__(self, chain: ChainQuery, config: QuoterConfig = DEFAULT_CONFIG) -> None:
        """Initialize the service.

        Args:
            chain: Read-only call capability (HTTP, cached, or a test fake)
            config: Contract locations
        """
        self.chain = chain
        self.config = config
        self.pools = PoolStore(chain, config)
        self.math = OnChainMath(chain, config)
        self.swaps = SwapQuoter(self.pools, self.math)
        self.deposits = LiquidityQuoter(self.pools, self.math)
        self.removals = RemovalQuoter(self.pools)

    @classmethod
    def from_config(cls, config: QuoterConfig) -> DexReadService:
        return cls(build_chain_query(config), config)

    async def aclose(self) -> None:
        close = getattr(self.chain, "aclose", None)
        if close is not None:
            await close()

    # --- Pools ---

    async def get_number_of_pools(self) -> int:
        return await self.pools.get_number_of_pools()

    async def get_pool_by_id(self, pool_id: str | int) -> Pool:
        return await self.pools.get_pool_by_id(pool_id)

    async def get_pool(self, token0: str, token1: str) -> Pool:
        return await self.pools.get_pool(token0, token1)

    async def get_pools(self, pairs: Sequence[tuple[str, str]]) -> list[Pool]:
        return await self.pools.get_pools(pairs)

    async def get_pools_by_id(self, pool_ids: Sequence[str | int]) -> list[Pool]:
        return await self.pools.get_pools_by_id(pool_ids)

    # --- Swaps ---

    async def get_swap_quote(self, token_in: str, token_out: str, amount_in: int) -> SwapQuote:
        return await self.swaps.get_swap_quote(token_in, token_out, amount_in)

    async def get_swap_quote_for_exact_output(
        self, token_in: str, token_out: str, amount_out: int
    ) -> SwapQuote:
        return await self.swaps.get_swap_quote_for_exact_output(token_in, token_out, amount_out)

    async def get_multi_hop_quote(self, path: Sequence[str], amount_in: int) -> SwapQuote:
        return await self.swaps.get_multi_hop_quote(path, amount_in)

    async def get_multi_hop_quote_for_exact_output(
        self, path: Sequence[str], amount_out: int
    ) -> SwapQuote:
        return await self.swaps.get_multi_hop_quote_for_exact_output(path, amount_out)

    async def batch_get_quotes(self, queries: Sequence[SwapQuery]) -> list[SwapQuote]:
        return await self.swaps.batch_get_quotes(queries)

    # --- Liquidity ---

    async def get_liquidity_quote(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
    ) -> LiquidityQuote:
        return await self.deposits.get_liquidity_quote(
            pool_id, amount0_desired, amount1_desired, amount0_min, amount1_min
        )

    async def calculate_liquidity_tokens(self, pool_id: str, amount0: int, amount1: int) -> int:
        return await self.deposits.calculate_liquidity_tokens(pool_id, amount0, amount1)

    async def batch_get_liquidity_quotes(
        self, queries: Sequence[LiquidityQuery]
    ) -> list[LiquidityQuote]:
        return await self.deposits.batch_get_liquidity_quotes(queries)

    async def get_remove_liquidity_quote(
        self, pool_id: str, liquidity_tokens: int
    ) -> RemovalQuote:
        return await self.removals.get_remove_liquidity_quote(pool_id, liquidity_tokens)

    async def get_remove_liquidity_range_quotes(
        self, pool_id: str, total_liquidity: int
    ) -> list[RemovalQuote]:
        return await self.removals.get_remove_liquidity_range_quotes(pool_id, total_liquidity)

    async def batch_get_remove_liquidity_quotes(
        self, queries: Sequence[RemovalQuery]
    ) -> list[RemovalQuote]:
        return await self.removals.batch_get_remove_liquidity_quotes(queries)


_default_service: DexReadService | None = None


def get_default_service() -> DexReadService:
    """Process-wide service configured from the environment (created on first use)."""
    global _default_service
    if _default_service is None:
        config = QuoterConfig.from_env()
        logger.info(
            "dex_service_created",
            api_base_url=config.api_base_url,
            dex_address=config.dex_address,
            cache_enabled=config.cache_enabled,
        )
        _default_service = DexReadService.from_config(config)
    return _default_service


async def close_default_service() -> None:
    global _default_service
    if _default_service is not None:
        await _default_service.aclose()
        _default_service = None
