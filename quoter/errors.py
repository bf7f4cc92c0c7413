"""Error taxonomy for DEX read operations.

Every failure that leaves the quoting core is a DexReadError carrying a
DexErrorCode. Callers can branch on the code or catch the per-kind subclass.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


class DexErrorCode(str, Enum):
    """Kinds of DEX read failures."""

    POOL_NOT_FOUND = "POOL_NOT_FOUND"
    INSUFFICIENT_LIQUIDITY = "INSUFFICIENT_LIQUIDITY"
    INVALID_PATH = "INVALID_PATH"
    CONTRACT_ERROR = "CONTRACT_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_AMOUNTS = "INVALID_AMOUNTS"
    MINIMUM_NOT_MET = "MINIMUM_NOT_MET"
    ZERO_LIQUIDITY = "ZERO_LIQUIDITY"


class DexReadError(Exception):
    """Base error for DEX read operations.

    Attributes:
        code: Kind of failure
        message: Human-readable description
        details: Structured context (amounts, ids, chain error payloads)
    """

    code: DexErrorCode = DexErrorCode.CONTRACT_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        code: DexErrorCode | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if code is not None:
            self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value}: {self.message})"

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form. Integers in details are rendered as strings."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": {key: _jsonable(value) for key, value in self.details.items()},
        }


class PoolNotFoundError(DexReadError):
    """No pool exists for the requested id or token pair."""

    code = DexErrorCode.POOL_NOT_FOUND


class InsufficientLiquidityError(DexReadError):
    """Pool reserves or supply cannot support the request."""

    code = DexErrorCode.INSUFFICIENT_LIQUIDITY


class InvalidPathError(DexReadError):
    """Swap path is too short or a token is not in the hop's pool."""

    code = DexErrorCode.INVALID_PATH


class ContractError(DexReadError):
    """The read-only call failed on-chain or returned an unusable value."""

    code = DexErrorCode.CONTRACT_ERROR


class NetworkError(DexReadError):
    """Transport-level failure talking to the chain API."""

    code = DexErrorCode.NETWORK_ERROR


class InvalidAmountsError(DexReadError):
    """Caller-supplied amounts violate preconditions."""

    code = DexErrorCode.INVALID_AMOUNTS


class MinimumNotMetError(DexReadError):
    """Optimal deposit falls below the caller's minimum."""

    code = DexErrorCode.MINIMUM_NOT_MET


class ZeroLiquidityError(DexReadError):
    """Pool has no LP supply to remove from."""

    code = DexErrorCode.ZERO_LIQUIDITY


def classify_errors(
    message: str,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator that converts unclassified exceptions into ContractError.

    DexReadError instances pass through untouched. Anything else is wrapped
    so that no opaque exception escapes a public operation; the original
    exception is kept as ``__cause__``.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except DexReadError:
                raise
            except Exception as e:
                raise ContractError(message, {"cause": repr(e)}) from e

        return wrapper

    return decorator


def _jsonable(value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, float | str):
        return value
    return repr(value)


__all__ = [
    "DexErrorCode",
    "DexReadError",
    "PoolNotFoundError",
    "InsufficientLiquidityError",
    "InvalidPathError",
    "ContractError",
    "NetworkError",
    "InvalidAmountsError",
    "MinimumNotMetError",
    "ZeroLiquidityError",
    "classify_errors",
]
