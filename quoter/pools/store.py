"""Pool lookup against the DEX core contract.

PoolStore turns pool ids and token pairs into Pool snapshots. Pool state is
always read fresh; only the pair -> id mapping is remembered, because pool
ids never change once a pair is registered.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from quoter.batch import POOL_LOOKUP_ERRORS, gather_lenient
from quoter.chain.clarity import (
    ClarityEncodingError,
    ClarityType,
    ClarityValue,
    principal_cv,
    uint_cv,
)
from quoter.chain.client import ChainQuery
from quoter.config import DEFAULT_CONFIG, QuoterConfig
from quoter.constants import GET_NR_POOLS, GET_POOL, GET_POOL_ID, GET_TOTAL_SUPPLY
from quoter.errors import ContractError, PoolNotFoundError, classify_errors
from quoter.models.pool import Fee, Pool
from quoter.models.types import split_contract_principal
from quoter.safe_int import UINT128_MAX

logger = structlog.get_logger()


def parse_pool_id(pool_id: str | int) -> int:
    """Validate a pool id.

    Raises:
        PoolNotFoundError: If the id is not a non-negative integer; no pool
            can exist under such an id
    """
    if isinstance(pool_id, bool):
        raise PoolNotFoundError("Pool not found", {"id": pool_id})
    if isinstance(pool_id, int):
        value = pool_id
    else:
        text = str(pool_id).strip()
        if not (text.isascii() and text.isdigit()):
            raise PoolNotFoundError("Pool not found", {"id": pool_id})
        value = int(text)
    if value < 0 or value > UINT128_MAX:
        raise PoolNotFoundError("Pool not found", {"id": pool_id})
    return value


def _uint_field(pool: ClarityValue, name: str) -> int:
    field = pool[name].unwrap()
    if field.type != ClarityType.UINT:
        raise ContractError(f"Pool field {name} is not a uint", {"type": field.type.name})
    value: int = field.value
    return value


def _principal_field(pool: ClarityValue, name: str) -> str:
    field = pool[name].unwrap()
    if field.type not in (ClarityType.PRINCIPAL_CONTRACT, ClarityType.PRINCIPAL_STANDARD):
        raise ContractError(f"Pool field {name} is not a principal", {"type": field.type.name})
    value: str = field.value
    return value


def _fee_field(pool: ClarityValue, name: str) -> Fee | None:
    try:
        fee = pool[name]
    except KeyError:
        return None
    return Fee(numerator=_uint_field(fee, "num"), denominator=_uint_field(fee, "den"))


def _pair_key(token0: str, token1: str) -> frozenset[str]:
    return frozenset((token0, token1))


class PoolStore:
    """Resolves pools by id or token pair.

    Each call returns a new immutable snapshot. The only state kept between
    calls is the pair -> id cache.
    """

    def __init__(self, chain: ChainQuery, config: QuoterConfig = DEFAULT_CONFIG) -> None:
        self.chain = chain
        self.config = config
        self._pair_ids: dict[frozenset[str], str] = {}

    async def _call_core(self, method: str, args: list[ClarityValue]) -> ClarityValue:
        return await self.chain.call_read_only(
            method, args, self.config.dex_address, self.config.core_contract
        )

    @classify_errors("Failed to get number of pools")
    async def get_number_of_pools(self) -> int:
        """Total number of pools registered in the core contract."""
        result = (await self._call_core(GET_NR_POOLS, [])).unwrap()
        if result.type != ClarityType.UINT:
            raise ContractError("get-nr-pools returned a non-uint", {"type": result.type.name})
        count: int = result.value
        return count

    @classify_errors("Failed to get pool total supply")
    async def get_total_supply(self, lp_token: str) -> int:
        """LP token supply, read from the LP token contract itself."""
        address, name = split_contract_principal(lp_token)
        result = await self.chain.call_read_only(GET_TOTAL_SUPPLY, [], address, name)
        if result.is_err:
            raise ContractError(
                "get-total-supply failed", {"lp_token": lp_token, "chain_error": result.to_python()}
            )
        supply = result.unwrap()
        if supply.type != ClarityType.UINT:
            raise ContractError("get-total-supply returned a non-uint", {"lp_token": lp_token})
        value: int = supply.value
        return value

    @classify_errors("Failed to get pool by ID")
    async def get_pool_by_id(self, pool_id: str | int) -> Pool:
        """Fetch a pool snapshot by id.

        Raises:
            PoolNotFoundError: If no pool has this id
        """
        numeric_id = parse_pool_id(pool_id)
        result = await self._call_core(GET_POOL, [uint_cv(numeric_id)])
        if result.is_none:
            logger.debug("pool_not_found", pool_id=numeric_id)
            raise PoolNotFoundError("Pool not found", {"id": str(numeric_id)})

        try:
            lp_token = _principal_field(result, "lp-token")
            token0 = _principal_field(result, "token0")
            token1 = _principal_field(result, "token1")
            reserve0 = _uint_field(result, "reserve0")
            reserve1 = _uint_field(result, "reserve1")
            swap_fee = _fee_field(result, "swap-fee")
            protocol_fee = _fee_field(result, "protocol-fee")
            share_fee = _fee_field(result, "share-fee")
        except KeyError as e:
            raise ContractError(
                "Malformed get-pool result", {"id": str(numeric_id), "missing": str(e)}
            ) from e
        if swap_fee is None:
            raise ContractError("Pool has no swap fee", {"id": str(numeric_id)})

        total_supply = await self.get_total_supply(lp_token)
        return Pool(
            id=str(numeric_id),
            token0=token0,
            token1=token1,
            reserve0=reserve0,
            reserve1=reserve1,
            lp_token=lp_token,
            lp_token_total_supply=total_supply,
            swap_fee=swap_fee,
            protocol_fee=protocol_fee,
            share_fee=share_fee,
        )

    async def _lookup_pool_id(self, first: str, second: str) -> str | None:
        result = await self._call_core(GET_POOL_ID, [principal_cv(first), principal_cv(second)])
        if result.is_none or result.is_err:
            return None
        value = result.unwrap()
        if value.type != ClarityType.UINT:
            raise ContractError("get-pool-id returned a non-uint", {"type": value.type.name})
        return str(value.value)

    async def _get_pool_id(self, token0: str, token1: str) -> str:
        """Resolve a pair to its pool id, trying both token orders.

        Raises:
            PoolNotFoundError: If neither order is registered
        """
        key = _pair_key(token0, token1)
        cached = self._pair_ids.get(key)
        if cached is not None:
            return cached

        try:
            pool_id = await self._lookup_pool_id(token0, token1)
            if pool_id is None:
                pool_id = await self._lookup_pool_id(token1, token0)
        except ClarityEncodingError as e:
            raise PoolNotFoundError(
                "Pool not found for token pair",
                {"token0": token0, "token1": token1, "reason": str(e)},
            ) from e

        if pool_id is None:
            logger.debug("pair_not_found", token0=token0, token1=token1)
            raise PoolNotFoundError(
                "Pool not found for token pair", {"token0": token0, "token1": token1}
            )
        self._pair_ids[key] = pool_id
        return pool_id

    @classify_errors("Failed to get pool")
    async def get_pool(self, token0: str, token1: str) -> Pool:
        """Fetch the pool for a token pair, in either order.

        Raises:
            PoolNotFoundError: If no pool exists for the pair
        """
        pool_id = await self._get_pool_id(token0, token1)
        return await self.get_pool_by_id(pool_id)

    @classify_errors("Failed to get pools")
    async def get_pools(self, pairs: Sequence[tuple[str, str]]) -> list[Pool]:
        """Fetch pools for many pairs concurrently.

        Pairs without a pool are skipped; any other failure fails the call.
        """
        return await gather_lenient(
            (self.get_pool(token0, token1) for token0, token1 in pairs),
            keys=[f"{token0}/{token1}" for token0, token1 in pairs],
            tolerated=POOL_LOOKUP_ERRORS,
            event="pool_lookup_skipped",
        )

    @classify_errors("Failed to get pools")
    async def get_pools_by_id(self, pool_ids: Sequence[str | int]) -> list[Pool]:
        """Fetch pools for many ids concurrently, skipping unknown ids."""
        return await gather_lenient(
            (self.get_pool_by_id(pool_id) for pool_id in pool_ids),
            keys=[str(pool_id) for pool_id in pool_ids],
            tolerated=POOL_LOOKUP_ERRORS,
            event="pool_lookup_skipped",
        )
