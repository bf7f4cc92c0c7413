"""Concurrent fan-out / fan-in for batch operations.

Two policies exist and callers pick one explicitly:

- strict: the first failure propagates and the whole batch fails
- lenient: failures of the tolerated kinds are logged and dropped, the rest
  of the batch is returned in input order; any other failure propagates

Neither policy cancels siblings: once launched, every item runs to
completion and results of a failed strict batch are discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Collection, Iterable, Sequence
from typing import Any, TypeVar

import structlog

from quoter.errors import DexErrorCode, DexReadError

logger = structlog.get_logger()

T = TypeVar("T")

# Per-item data problems; only NETWORK_ERROR is excluded
ITEM_ERRORS: frozenset[DexErrorCode] = frozenset(DexErrorCode) - {DexErrorCode.NETWORK_ERROR}

POOL_LOOKUP_ERRORS: frozenset[DexErrorCode] = frozenset({DexErrorCode.POOL_NOT_FOUND})


async def gather_strict(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run all awaitables concurrently; raise the first failure."""
    return list(await asyncio.gather(*aws))


async def gather_lenient(
    aws: Iterable[Awaitable[T]],
    keys: Sequence[Any],
    tolerated: Collection[DexErrorCode],
    event: str = "batch_item_dropped",
) -> list[T]:
    """Run all awaitables concurrently, dropping tolerated failures.

    Args:
        aws: Awaitables, one per batch item
        keys: Identifies each item in log output; same length as aws
        tolerated: Error codes that drop the item instead of failing the batch
        event: Log event name for dropped items

    Returns:
        Successful results in input order
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    survivors: list[T] = []
    for key, result in zip(keys, results, strict=True):
        if isinstance(result, DexReadError) and result.code in tolerated:
            logger.warning(
                event,
                item=key,
                code=result.code.value,
                error=result.message,
            )
            continue
        if isinstance(result, BaseException):
            raise result
        survivors.append(result)
    return survivors


__all__ = [
    "ITEM_ERRORS",
    "POOL_LOOKUP_ERRORS",
    "gather_strict",
    "gather_lenient",
]
