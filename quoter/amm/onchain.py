"""Swap and deposit math evaluated by the DEX's read-only functions."""

from __future__ import annotations

import structlog

from quoter.chain.clarity import (
    ClarityEncodingError,
    ClarityType,
    ClarityValue,
    tuple_cv,
    uint_cv,
)
from quoter.chain.client import ChainQuery
from quoter.config import DEFAULT_CONFIG, QuoterConfig
from quoter.constants import ADD_LIQUIDITY_CALC, GET_AMOUNT_IN, GET_AMOUNT_OUT
from quoter.errors import (
    ContractError,
    InsufficientLiquidityError,
    InvalidAmountsError,
)
from quoter.models.pool import Fee

logger = structlog.get_logger()


def _uint_arg(name: str, value: int) -> ClarityValue:
    try:
        return uint_cv(value)
    except ClarityEncodingError as e:
        raise InvalidAmountsError(
            f"{name} is not a valid uint128", {name: value}
        ) from e


def fee_cv(fee: Fee) -> ClarityValue:
    return tuple_cv(
        {
            "num": _uint_arg("fee_num", fee.numerator),
            "den": _uint_arg("fee_den", fee.denominator),
        }
    )


def _expect_uint(result: ClarityValue, context: dict[str, object]) -> int:
    value = result.unwrap()
    if value.type != ClarityType.UINT:
        raise ContractError(
            "Unexpected result type from contract", {**context, "type": value.type.name}
        )
    amount: int = value.value
    return amount


class OnChainMath:
    """PoolMath implementation backed by read-only contract calls.

    get-amount-out lives in the path2 contract, get-amount-in in the library
    contract, add-liquidity-calc in the router.
    """

    def __init__(self, chain: ChainQuery, config: QuoterConfig = DEFAULT_CONFIG) -> None:
        self.chain = chain
        self.config = config

    async def get_amount_out(
        self, amount_in: int, reserve_in: int, reserve_out: int, fee: Fee
    ) -> int:
        args = [
            _uint_arg("amount_in", amount_in),
            _uint_arg("reserve_in", reserve_in),
            _uint_arg("reserve_out", reserve_out),
            fee_cv(fee),
        ]
        result = await self.chain.call_read_only(
            GET_AMOUNT_OUT, args, self.config.dex_address, self.config.path2_contract
        )
        context = {"amount_in": amount_in, "reserve_in": reserve_in, "reserve_out": reserve_out}
        if result.is_err:
            logger.debug("amount_out_rejected", error=result.to_python(), **context)
            raise InsufficientLiquidityError(
                "Swap rejected by pool math", {**context, "chain_error": result.to_python()}
            )
        return _expect_uint(result, context)

    async def get_amount_in(
        self, amount_out: int, reserve_in: int, reserve_out: int, fee: Fee
    ) -> int:
        args = [
            _uint_arg("amount_out", amount_out),
            _uint_arg("reserve_in", reserve_in),
            _uint_arg("reserve_out", reserve_out),
            fee_cv(fee),
        ]
        result = await self.chain.call_read_only(
            GET_AMOUNT_IN, args, self.config.dex_address, self.config.library_contract
        )
        context = {"amount_out": amount_out, "reserve_in": reserve_in, "reserve_out": reserve_out}
        if result.is_err:
            logger.debug("amount_in_rejected", error=result.to_python(), **context)
            raise InsufficientLiquidityError(
                "Swap rejected by pool math", {**context, "chain_error": result.to_python()}
            )
        return _expect_uint(result, context)

    async def add_liquidity_calc(
        self,
        pool_id: str,
        amount0_desired: int,
        amount1_desired: int,
        amount0_min: int,
        amount1_min: int,
    ) -> tuple[int, int]:
        args = [
            _uint_arg("pool_id", int(pool_id)),
            _uint_arg("amount0_desired", amount0_desired),
            _uint_arg("amount1_desired", amount1_desired),
            _uint_arg("amount0_min", amount0_min),
            _uint_arg("amount1_min", amount1_min),
        ]
        result = await self.chain.call_read_only(
            ADD_LIQUIDITY_CALC, args, self.config.dex_address, self.config.router_contract
        )
        context = {"pool_id": pool_id}
        if result.is_err:
            raise ContractError(
                "add-liquidity-calc failed", {**context, "chain_error": result.to_python()}
            )
        try:
            return _expect_uint(result["amt0"], context), _expect_uint(result["amt1"], context)
        except KeyError as e:
            raise ContractError("Malformed add-liquidity-calc result", context) from e
