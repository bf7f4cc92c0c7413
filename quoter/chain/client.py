"""Read-only contract call clients.

ChainQuery is the only way the quoting core talks to the chain. The HTTP
implementation goes through a Stacks API node; CachedChainQuery layers a
response cache over any implementation; tests substitute an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx
import structlog

from quoter.chain.cache import MISSING, ResponseCache
from quoter.chain.clarity import (
    ClarityDecodingError,
    ClarityEncodingError,
    ClarityValue,
    from_hex,
    to_hex,
)
from quoter.config import QuoterConfig
from quoter.constants import HIRO_MAINNET_API, PURE_METHODS
from quoter.errors import ContractError, InvalidAmountsError, NetworkError

logger = structlog.get_logger()


@runtime_checkable
class ChainQuery(Protocol):
    """Protocol for read-only contract call implementations."""

    async def call_read_only(
        self,
        method: str,
        args: list[ClarityValue],
        contract_address: str,
        contract_name: str,
    ) -> ClarityValue:
        """Call a read-only function and return its decoded result.

        Args:
            method: Clarity function name (e.g. "get-pool")
            args: Arguments as Clarity values
            contract_address: Deployer address of the contract
            contract_name: Contract name

        Returns:
            The decoded Clarity result

        Raises:
            ContractError: The call failed on-chain or the result is undecodable
            NetworkError: The API could not be reached
        """
        ...


def encode_args(args: list[ClarityValue]) -> list[str]:
    """Hex-encode call arguments.

    Raises:
        InvalidAmountsError: If an argument cannot be serialized
    """
    try:
        return [to_hex(arg) for arg in args]
    except ClarityEncodingError as e:
        raise InvalidAmountsError(f"Cannot encode call argument: {e}") from e


class HiroChainQuery:
    """ChainQuery backed by the Stacks API ``/v2/contracts/call-read`` endpoint."""

    def __init__(
        self,
        base_url: str = HIRO_MAINNET_API,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: API node URL (ignored when client is given)
            api_key: Optional key sent as x-hiro-api-key
            timeout: Request timeout in seconds (ignored when client is given)
            client: Pre-built AsyncClient; its base_url must point at the node
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self._api_key = api_key

    @classmethod
    def from_config(cls, config: QuoterConfig) -> HiroChainQuery:
        return cls(
            base_url=config.api_base_url,
            api_key=config.api_key,
            timeout=config.request_timeout,
        )

    @property
    def provider(self) -> str:
        return str(self._client.base_url).rstrip("/")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def call_read_only(
        self,
        method: str,
        args: list[ClarityValue],
        contract_address: str,
        contract_name: str,
    ) -> ClarityValue:
        args_hex = encode_args(args)
        path = f"/v2/contracts/call-read/{contract_address}/{contract_name}/{method}"
        headers = {"x-hiro-api-key": self._api_key} if self._api_key else None
        context = {"contract": f"{contract_address}.{contract_name}", "method": method}

        try:
            response = await self._client.post(
                path,
                json={"sender": contract_address, "arguments": args_hex},
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.warning("chain_call_timeout", error=str(e), **context)
            raise NetworkError("Chain API request timed out", context) from e
        except httpx.HTTPError as e:
            logger.warning("chain_call_transport_error", error=str(e), **context)
            raise NetworkError("Network request failed", context) from e

        if response.status_code == 429 or response.status_code >= 500:
            logger.warning("chain_api_unavailable", status=response.status_code, **context)
            raise NetworkError(
                f"Chain API returned HTTP {response.status_code}",
                {**context, "status": response.status_code},
            )
        if response.status_code >= 400:
            logger.warning("chain_call_rejected", status=response.status_code, **context)
            raise ContractError(
                "Contract call failed",
                {**context, "status": response.status_code, "body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ContractError("Chain API returned invalid JSON", context) from e

        if not isinstance(payload, dict) or not payload.get("okay"):
            cause = payload.get("cause") if isinstance(payload, dict) else None
            logger.warning("chain_call_failed", cause=cause, **context)
            raise ContractError("Contract call failed", {**context, "cause": cause})

        result = payload.get("result")
        if not isinstance(result, str):
            raise ContractError("Contract call returned no result", context)
        try:
            return from_hex(result)
        except ClarityDecodingError as e:
            raise ContractError(
                "Cannot decode contract call result", {**context, "result": result[:200]}
            ) from e


class CachedChainQuery:
    """ChainQuery decorator that caches successful results.

    Only successful calls are stored; errors always go back to the inner
    implementation on the next attempt.
    """

    def __init__(
        self,
        inner: ChainQuery,
        cache: ResponseCache | None = None,
        provider: str | None = None,
    ) -> None:
        self._inner = inner
        self.cache = cache if cache is not None else ResponseCache()
        self._provider = provider or getattr(inner, "provider", type(inner).__name__)

    @classmethod
    def from_config(cls, inner: ChainQuery, config: QuoterConfig) -> CachedChainQuery:
        cache = ResponseCache(
            default_ttl=config.cache_ttl,
            method_ttls={method: config.math_cache_ttl for method in PURE_METHODS},
        )
        return cls(inner, cache=cache)

    async def aclose(self) -> None:
        close = getattr(self._inner, "aclose", None)
        if close is not None:
            await close()

    async def call_read_only(
        self,
        method: str,
        args: list[ClarityValue],
        contract_address: str,
        contract_name: str,
    ) -> ClarityValue:
        key = ResponseCache.make_key(
            self._provider,
            f"{contract_address}.{contract_name}",
            method,
            encode_args(args),
        )
        cached = self.cache.get(key)
        if cached is not MISSING:
            logger.debug("chain_cache_hit", method=method, contract=key[1])
            result: ClarityValue = cached
            return result

        result = await self._inner.call_read_only(method, args, contract_address, contract_name)
        self.cache.set(key, result)
        return result


def build_chain_query(config: QuoterConfig) -> ChainQuery:
    """Create the HTTP chain client described by config, cached if enabled."""
    client = HiroChainQuery.from_config(config)
    if not config.cache_enabled:
        return client
    return CachedChainQuery.from_config(client, config)


__all__ = [
    "ChainQuery",
    "HiroChainQuery",
    "CachedChainQuery",
    "build_chain_query",
    "encode_args",
]
