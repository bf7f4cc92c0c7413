"""Pool lookup package."""

from .store import PoolStore, parse_pool_id

__all__ = ["PoolStore", "parse_pool_id"]
