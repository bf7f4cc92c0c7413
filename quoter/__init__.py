"""Quoting engine for constant-product DEX pools on Stacks."""

from quoter.errors import DexErrorCode, DexReadError
from quoter.service import DexReadService, get_default_service

__version__ = "0.1.0"
__all__ = [
    "DexReadService",
    "DexReadError",
    "DexErrorCode",
    "get_default_service",
    "__version__",
]
