"""Configuration for the quoting service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from quoter.constants import (
    CORE_CONTRACT,
    DEX_DEPLOYER,
    HIRO_MAINNET_API,
    LIBRARY_CONTRACT,
    PATH2_CONTRACT,
    ROUTER_CONTRACT,
)


def _env_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class QuoterConfig:
    """Centralized configuration for chain access and caching.

    Attributes:
        api_base_url: Stacks API node serving /v2/contracts/call-read
        api_key: Optional Hiro API key (sent as x-hiro-api-key)
        dex_address: Deployer of the four DEX contracts
        core_contract: Pool registry contract (get-pool, get-pool-id, get-nr-pools)
        router_contract: Router contract (add-liquidity-calc)
        path2_contract: Contract serving get-amount-out
        library_contract: Contract serving get-amount-in
        request_timeout: Per-request timeout in seconds
        cache_enabled: Wrap the chain client in a response cache
        cache_ttl: TTL in seconds for state reads
        math_cache_ttl: TTL in seconds for pure math reads
    """

    api_base_url: str = HIRO_MAINNET_API
    api_key: str | None = None
    dex_address: str = DEX_DEPLOYER
    core_contract: str = CORE_CONTRACT
    router_contract: str = ROUTER_CONTRACT
    path2_contract: str = PATH2_CONTRACT
    library_contract: str = LIBRARY_CONTRACT
    request_timeout: float = 10.0
    cache_enabled: bool = True
    cache_ttl: float = 30.0
    math_cache_ttl: float = 3600.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> QuoterConfig:
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            api_base_url=env.get("QUOTER_API_BASE_URL", defaults.api_base_url).rstrip("/"),
            api_key=env.get("STACKS_API_KEY") or None,
            dex_address=env.get("QUOTER_DEX_ADDRESS", defaults.dex_address),
            core_contract=env.get("QUOTER_CORE_CONTRACT", defaults.core_contract),
            router_contract=env.get("QUOTER_ROUTER_CONTRACT", defaults.router_contract),
            path2_contract=env.get("QUOTER_PATH2_CONTRACT", defaults.path2_contract),
            library_contract=env.get("QUOTER_LIBRARY_CONTRACT", defaults.library_contract),
            request_timeout=float(env.get("QUOTER_REQUEST_TIMEOUT", defaults.request_timeout)),
            cache_enabled=_env_bool(env.get("QUOTER_CACHE_ENABLED", "true")),
            cache_ttl=float(env.get("QUOTER_CACHE_TTL", defaults.cache_ttl)),
            math_cache_ttl=float(env.get("QUOTER_MATH_CACHE_TTL", defaults.math_cache_ttl)),
        )


# Default configuration instance
DEFAULT_CONFIG = QuoterConfig()
