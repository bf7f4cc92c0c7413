"""Data models for pools and quotes."""

from quoter.models.pool import Fee, Pool
from quoter.models.quotes import (
    LiquidityQuery,
    LiquidityQuote,
    RemovalQuery,
    RemovalQuote,
    SwapQuery,
    SwapQuote,
)
from quoter.models.types import (
    ContractPrincipal,
    StacksAddress,
    Uint128,
    is_valid_contract_principal,
    is_valid_stacks_address,
    split_contract_principal,
)

__all__ = [
    "Fee",
    "Pool",
    "SwapQuote",
    "LiquidityQuote",
    "RemovalQuote",
    "SwapQuery",
    "LiquidityQuery",
    "RemovalQuery",
    "Uint128",
    "StacksAddress",
    "ContractPrincipal",
    "is_valid_stacks_address",
    "is_valid_contract_principal",
    "split_contract_principal",
]
