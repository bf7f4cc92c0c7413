"""In-memory ChainQuery serving the DEX contract surface.

FakeChain answers the same read-only calls the quoting core makes, using the
Uniswap-V2 integer formulas, and records every call for assertions.

Usage:
    chain = FakeChain()
    pool_id = chain.add_pool(CHA, WELSH, 1_000_000, 2_000_000)
    service = DexReadService(chain)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from quoter.amm.formulas import isqrt
from quoter.chain.clarity import (
    ClarityValue,
    err_cv,
    none_cv,
    ok_cv,
    principal_cv,
    some_cv,
    tuple_cv,
    uint_cv,
)
from quoter.config import DEFAULT_CONFIG, QuoterConfig
from quoter.constants import (
    ADD_LIQUIDITY_CALC,
    GET_AMOUNT_IN,
    GET_AMOUNT_OUT,
    GET_NR_POOLS,
    GET_POOL,
    GET_POOL_ID,
    GET_TOTAL_SUPPLY,
)
from tests.helpers.constants import DEFAULT_FEE

# Error codes returned by the fake contracts
ERR_INSUFFICIENT_LIQUIDITY = 101
ERR_INSUFFICIENT_INPUT = 102
ERR_NO_POOL = 103
ERR_NO_TOKEN = 104


@dataclass
class FakePool:
    """Mutable pool state held by the fake core contract."""

    token0: str
    token1: str
    reserve0: int
    reserve1: int
    total_supply: int
    lp_token: str
    fee: tuple[int, int] = DEFAULT_FEE
    protocol_fee: tuple[int, int] = (50, 100)
    share_fee: tuple[int, int] = (0, 100)


@dataclass(frozen=True)
class ChainCall:
    """One recorded read-only call."""

    method: str
    contract: str
    args: tuple[ClarityValue, ...]


def _fee_cv(fee: tuple[int, int]) -> ClarityValue:
    return tuple_cv({"num": uint_cv(fee[0]), "den": uint_cv(fee[1])})


def _uint(cv: ClarityValue) -> int:
    value: int = cv.value
    return value


def _fee(cv: ClarityValue) -> tuple[int, int]:
    return _uint(cv["num"]), _uint(cv["den"])


def amount_out(amount_in: int, reserve_in: int, reserve_out: int, fee: tuple[int, int]) -> int:
    """Uniswap-V2 getAmountOut with a fractional fee."""
    num, den = fee
    amount_in_with_fee = amount_in * (den - num)
    return amount_in_with_fee * reserve_out // (reserve_in * den + amount_in_with_fee)


def amount_in(amount_out: int, reserve_in: int, reserve_out: int, fee: tuple[int, int]) -> int:
    """Uniswap-V2 getAmountIn with a fractional fee."""
    num, den = fee
    return reserve_in * amount_out * den // ((reserve_out - amount_out) * (den - num)) + 1


class FakeChain:
    """ChainQuery test double for the univ2 contracts.

    Attributes:
        pools: Pool state by numeric id
        calls: Every call made, in order
        failures: Method name -> exception raised instead of answering
        delay: Seconds to sleep before answering each call
    """

    def __init__(self, config: QuoterConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.pools: dict[int, FakePool] = {}
        self.calls: list[ChainCall] = []
        self.failures: dict[str, Exception] = {}
        self.delay = 0.0

    # --- Setup ---

    def add_pool(
        self,
        token0: str,
        token1: str,
        reserve0: int,
        reserve1: int,
        total_supply: int | None = None,
        fee: tuple[int, int] = DEFAULT_FEE,
    ) -> str:
        """Register a pool and return its id as a string.

        total_supply defaults to sqrt(reserve0 * reserve1), the supply after a
        single initial deposit.
        """
        pool_id = len(self.pools) + 1
        if total_supply is None:
            total_supply = isqrt(reserve0 * reserve1)
        self.pools[pool_id] = FakePool(
            token0=token0,
            token1=token1,
            reserve0=reserve0,
            reserve1=reserve1,
            total_supply=total_supply,
            lp_token=f"{self.config.dex_address}.univ2-lp-token-{pool_id}",
            fee=fee,
        )
        return str(pool_id)

    def fail(self, method: str, error: Exception) -> None:
        """Make every call to ``method`` raise ``error``."""
        self.failures[method] = error

    def calls_to(self, method: str) -> list[ChainCall]:
        return [call for call in self.calls if call.method == method]

    # --- ChainQuery ---

    async def call_read_only(
        self,
        method: str,
        args: list[ClarityValue],
        contract_address: str,
        contract_name: str,
    ) -> ClarityValue:
        contract = f"{contract_address}.{contract_name}"
        self.calls.append(ChainCall(method, contract, tuple(args)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if method in self.failures:
            raise self.failures[method]

        if method == GET_POOL:
            return self._get_pool(_uint(args[0]))
        if method == GET_POOL_ID:
            return self._get_pool_id(args[0].value, args[1].value)
        if method == GET_NR_POOLS:
            return uint_cv(len(self.pools))
        if method == GET_TOTAL_SUPPLY:
            return self._get_total_supply(contract)
        if method == GET_AMOUNT_OUT:
            return self._get_amount_out(*(_uint(a) for a in args[:3]), _fee(args[3]))
        if method == GET_AMOUNT_IN:
            return self._get_amount_in(*(_uint(a) for a in args[:3]), _fee(args[3]))
        if method == ADD_LIQUIDITY_CALC:
            return self._add_liquidity_calc(*(_uint(a) for a in args))
        raise AssertionError(f"Unexpected read-only call {contract}::{method}")

    # --- Contract behavior ---

    def _get_pool(self, pool_id: int) -> ClarityValue:
        pool = self.pools.get(pool_id)
        if pool is None:
            return none_cv()
        return some_cv(
            tuple_cv(
                {
                    "lp-token": principal_cv(pool.lp_token),
                    "token0": principal_cv(pool.token0),
                    "token1": principal_cv(pool.token1),
                    "reserve0": uint_cv(pool.reserve0),
                    "reserve1": uint_cv(pool.reserve1),
                    "swap-fee": _fee_cv(pool.fee),
                    "protocol-fee": _fee_cv(pool.protocol_fee),
                    "share-fee": _fee_cv(pool.share_fee),
                    "block-height": uint_cv(100),
                    "burn-block-height": uint_cv(200),
                }
            )
        )

    def _get_pool_id(self, token0: str, token1: str) -> ClarityValue:
        # Only the canonical (registration) order is indexed
        for pool_id, pool in self.pools.items():
            if (pool.token0, pool.token1) == (token0, token1):
                return some_cv(uint_cv(pool_id))
        return none_cv()

    def _get_total_supply(self, lp_token: str) -> ClarityValue:
        for pool in self.pools.values():
            if pool.lp_token == lp_token:
                return ok_cv(uint_cv(pool.total_supply))
        return err_cv(uint_cv(ERR_NO_TOKEN))

    def _get_amount_out(
        self, amt_in: int, reserve_in: int, reserve_out: int, fee: tuple[int, int]
    ) -> ClarityValue:
        if amt_in == 0:
            return err_cv(uint_cv(ERR_INSUFFICIENT_INPUT))
        if reserve_in == 0 or reserve_out == 0:
            return err_cv(uint_cv(ERR_INSUFFICIENT_LIQUIDITY))
        return uint_cv(amount_out(amt_in, reserve_in, reserve_out, fee))

    def _get_amount_in(
        self, amt_out: int, reserve_in: int, reserve_out: int, fee: tuple[int, int]
    ) -> ClarityValue:
        if amt_out == 0:
            return err_cv(uint_cv(ERR_INSUFFICIENT_INPUT))
        if reserve_in == 0 or amt_out >= reserve_out:
            return err_cv(uint_cv(ERR_INSUFFICIENT_LIQUIDITY))
        return uint_cv(amount_in(amt_out, reserve_in, reserve_out, fee))

    def _add_liquidity_calc(
        self, pool_id: int, amt0_desired: int, amt1_desired: int, amt0_min: int, amt1_min: int
    ) -> ClarityValue:
        pool = self.pools.get(pool_id)
        if pool is None:
            return err_cv(uint_cv(ERR_NO_POOL))
        if pool.reserve0 == 0 and pool.reserve1 == 0:
            amt0, amt1 = amt0_desired, amt1_desired
        else:
            amt1_optimal = amt0_desired * pool.reserve1 // pool.reserve0
            if amt1_optimal <= amt1_desired:
                amt0, amt1 = amt0_desired, amt1_optimal
            else:
                amt0, amt1 = amt1_desired * pool.reserve0 // pool.reserve1, amt1_desired
        return ok_cv(tuple_cv({"amt0": uint_cv(amt0), "amt1": uint_cv(amt1)}))
