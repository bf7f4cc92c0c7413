"""Single-hop and multi-hop swap quoting.

Hop pools are resolved up front, concurrently and once per unordered pair,
so every hop of a route prices against the same snapshot even when the
route revisits a pair. The amount math itself is delegated to PoolMath.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from quoter.amm.base import PoolMath
from quoter.amm.formulas import price_impact
from quoter.batch import gather_strict
from quoter.errors import (
    InsufficientLiquidityError,
    InvalidAmountsError,
    InvalidPathError,
    classify_errors,
)
from quoter.models.pool import Pool
from quoter.models.quotes import SwapQuery, SwapQuote
from quoter.pools.store import PoolStore

logger = structlog.get_logger()


@dataclass(frozen=True)
class HopQuote:
    """Amounts through a single pool of a route."""

    pool_id: str
    token_in: str
    token_out: str
    amount_in: int
    amount_out: int
    price_impact: float


def _check_amount(name: str, amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountsError(f"{name} must be a positive integer", {name: amount})


def _check_path(path: Sequence[str]) -> tuple[str, ...]:
    route = tuple(path)
    if len(route) < 2:
        raise InvalidPathError("Path must contain at least 2 tokens", {"path": list(route)})
    for token_in, token_out in zip(route, route[1:]):
        if token_in == token_out:
            raise InvalidPathError(
                "Path cannot swap a token for itself", {"path": list(route), "token": token_in}
            )
    return route


def _oriented_reserves(pool: Pool, token_in: str, token_out: str) -> tuple[int, int]:
    if pool.get_token_out(token_in) != token_out:
        raise InvalidPathError(
            f"Pool {pool.id} does not trade {token_in} for {token_out}",
            {"pool_id": pool.id, "token_in": token_in, "token_out": token_out},
        )
    reserve_in, reserve_out = pool.get_reserves(token_in)
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidityError(
            "Pool has no liquidity",
            {"pool_id": pool.id, "reserve_in": reserve_in, "reserve_out": reserve_out},
        )
    return reserve_in, reserve_out


class SwapQuoter:
    """Quotes swaps along token paths."""

    def __init__(self, store: PoolStore, math: PoolMath) -> None:
        self.store = store
        self.math = math

    async def resolve_route(self, path: Sequence[str]) -> list[Pool]:
        """Fetch the pool of every hop, each distinct pair exactly once.

        Returns:
            One pool per hop, in path order
        """
        route = _check_path(path)
        hops = list(zip(route, route[1:]))
        unique: dict[frozenset[str], tuple[str, str]] = {}
        for token_in, token_out in hops:
            unique.setdefault(frozenset((token_in, token_out)), (token_in, token_out))

        pools = await gather_strict(self.store.get_pool(a, b) for a, b in unique.values())
        by_pair = dict(zip(unique, pools))
        return [by_pair[frozenset(hop)] for hop in hops]

    async def quote_hop_exact_input(
        self, pool: Pool, token_in: str, token_out: str, amount_in: int
    ) -> HopQuote:
        _check_amount("amount_in", amount_in)
        reserve_in, reserve_out = _oriented_reserves(pool, token_in, token_out)
        amount_out = await self.math.get_amount_out(
            amount_in, reserve_in, reserve_out, pool.swap_fee
        )
        return HopQuote(
            pool_id=pool.id,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact=price_impact(amount_in, amount_out, reserve_in, reserve_out),
        )

    async def quote_hop_exact_output(
        self, pool: Pool, token_in: str, token_out: str, amount_out: int
    ) -> HopQuote:
        _check_amount("amount_out", amount_out)
        reserve_in, reserve_out = _oriented_reserves(pool, token_in, token_out)
        if amount_out >= reserve_out:
            raise InsufficientLiquidityError(
                "Requested output exceeds pool reserves",
                {"pool_id": pool.id, "amount_out": amount_out, "reserve_out": reserve_out},
            )
        amount_in = await self.math.get_amount_in(
            amount_out, reserve_in, reserve_out, pool.swap_fee
        )
        return HopQuote(
            pool_id=pool.id,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact=price_impact(amount_in, amount_out, reserve_in, reserve_out),
        )

    async def _walk_forward(
        self, route: tuple[str, ...], pools: list[Pool], amount_in: int
    ) -> list[HopQuote]:
        hops: list[HopQuote] = []
        current = amount_in
        for i, pool in enumerate(pools):
            if i > 0 and current == 0:
                raise InsufficientLiquidityError(
                    f"Hop {i - 1} produces no output", {"path": list(route), "hop": i - 1}
                )
            hop = await self.quote_hop_exact_input(pool, route[i], route[i + 1], current)
            hops.append(hop)
            current = hop.amount_out
        return hops

    async def _walk_backward(
        self, route: tuple[str, ...], pools: list[Pool], amount_out: int
    ) -> list[HopQuote]:
        hops: list[HopQuote] = []
        current = amount_out
        for i in reversed(range(len(pools))):
            hop = await self.quote_hop_exact_output(pools[i], route[i], route[i + 1], current)
            hops.append(hop)
            current = hop.amount_in
        hops.reverse()
        return hops

    @staticmethod
    def _to_quote(route: tuple[str, ...], hops: list[HopQuote]) -> SwapQuote:
        # Per-hop impacts are summed, not compounded
        return SwapQuote(
            route=route,
            amount_in=hops[0].amount_in,
            amount_out=hops[-1].amount_out,
            price_impact=sum(hop.price_impact for hop in hops),
        )

    @classify_errors("Failed to get swap quote")
    async def get_swap_quote(self, token_in: str, token_out: str, amount_in: int) -> SwapQuote:
        """Quote selling exactly ``amount_in`` of token_in for token_out."""
        return await self.get_multi_hop_quote([token_in, token_out], amount_in)

    @classify_errors("Failed to get swap quote for exact output")
    async def get_swap_quote_for_exact_output(
        self, token_in: str, token_out: str, amount_out: int
    ) -> SwapQuote:
        """Quote the token_in needed to receive exactly ``amount_out`` of token_out."""
        return await self.get_multi_hop_quote_for_exact_output([token_in, token_out], amount_out)

    @classify_errors("Failed to get multi-hop quote")
    async def get_multi_hop_quote(self, path: Sequence[str], amount_in: int) -> SwapQuote:
        """Quote an exact-input swap along ``path``.

        Each hop's output is the next hop's input.

        Raises:
            InvalidPathError: If the path has fewer than 2 tokens
            InvalidAmountsError: If amount_in is not positive
            PoolNotFoundError: If a hop has no pool
            InsufficientLiquidityError: If a hop pool cannot fill the trade
        """
        route = _check_path(path)
        _check_amount("amount_in", amount_in)
        pools = await self.resolve_route(route)
        hops = await self._walk_forward(route, pools, amount_in)
        logger.debug(
            "swap_quoted",
            route=list(route),
            amount_in=amount_in,
            amount_out=hops[-1].amount_out,
        )
        return self._to_quote(route, hops)

    @classify_errors("Failed to get multi-hop quote for exact output")
    async def get_multi_hop_quote_for_exact_output(
        self, path: Sequence[str], amount_out: int
    ) -> SwapQuote:
        """Quote the input needed to receive exactly ``amount_out`` at the end of ``path``.

        Walked from the last hop backwards: each hop's required input is the
        previous hop's output target.
        """
        route = _check_path(path)
        _check_amount("amount_out", amount_out)
        pools = await self.resolve_route(route)
        hops = await self._walk_backward(route, pools, amount_out)
        logger.debug(
            "swap_quoted_exact_output",
            route=list(route),
            amount_in=hops[0].amount_in,
            amount_out=amount_out,
        )
        return self._to_quote(route, hops)

    @classify_errors("Failed to get batch quotes")
    async def batch_get_quotes(self, queries: Sequence[SwapQuery]) -> list[SwapQuote]:
        """Quote many routes concurrently. Any failure fails the whole batch."""
        return await gather_strict(
            self.get_multi_hop_quote(query.path, query.amount_in) for query in queries
        )
