"""Chain access: Clarity codec, read-only call clients and response cache."""

from quoter.chain.cache import ResponseCache
from quoter.chain.clarity import ClarityType, ClarityValue
from quoter.chain.client import (
    CachedChainQuery,
    ChainQuery,
    HiroChainQuery,
    build_chain_query,
)

__all__ = [
    "ChainQuery",
    "HiroChainQuery",
    "CachedChainQuery",
    "build_chain_query",
    "ResponseCache",
    "ClarityType",
    "ClarityValue",
]
