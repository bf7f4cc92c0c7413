"""Test helpers module for shared test utilities.

- constants: Token principals and common values
- fake_chain: In-memory ChainQuery serving the DEX contracts
"""

from tests.helpers.constants import (
    BOOT_ADDRESS,
    CHA,
    DEFAULT_FEE,
    DEPLOYER,
    UNLISTED,
    UPDOG,
    WELSH,
    WSTX,
)
from tests.helpers.fake_chain import ChainCall, FakeChain, FakePool

__all__ = [
    # Constants
    "DEPLOYER",
    "CHA",
    "WELSH",
    "WSTX",
    "UPDOG",
    "UNLISTED",
    "BOOT_ADDRESS",
    "DEFAULT_FEE",
    # Fakes
    "FakeChain",
    "FakePool",
    "ChainCall",
]
