"""Pytest configuration and fixtures."""

import pytest

from quoter.pools.store import PoolStore
from quoter.service import DexReadService
from tests.helpers import CHA, UPDOG, WELSH, WSTX, FakeChain

# =============================================================================
# Chain fixtures
# =============================================================================


@pytest.fixture
def chain() -> FakeChain:
    """Empty fake chain."""
    return FakeChain()


@pytest.fixture
def seeded_chain() -> FakeChain:
    """Fake chain with a small pool graph.

    Pool ids:
        1: CHA/WELSH   1_000_000 / 2_000_000
        2: WELSH/WSTX  5_000_000 / 1_000_000
        3: WSTX/UPDOG  0 / 0 (never funded)
    """
    fake = FakeChain()
    fake.add_pool(CHA, WELSH, 1_000_000, 2_000_000)
    fake.add_pool(WELSH, WSTX, 5_000_000, 1_000_000)
    fake.add_pool(WSTX, UPDOG, 0, 0, total_supply=0)
    return fake


@pytest.fixture
def store(seeded_chain: FakeChain) -> PoolStore:
    return PoolStore(seeded_chain)


@pytest.fixture
def service(seeded_chain: FakeChain) -> DexReadService:
    return DexReadService(seeded_chain)
