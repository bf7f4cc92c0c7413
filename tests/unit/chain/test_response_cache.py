"""Tests for the TTL response cache."""

import pytest

from quoter.chain.cache import MISSING, ResponseCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_key(method: str = "get-pool", args: list[str] | None = None):
    return ResponseCache.make_key("https://node", "SP1.univ2-core", method, args or ["0x01"])


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_miss_then_hit(self):
        cache = ResponseCache()
        key = make_key()
        assert cache.get(key) is MISSING
        cache.set(key, "value")
        assert cache.get(key) == "value"
        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1

    def test_entry_expires(self):
        clock = FakeClock()
        cache = ResponseCache(default_ttl=30, clock=clock)
        key = make_key()
        cache.set(key, "value")
        clock.now += 29.9
        assert cache.get(key) == "value"
        clock.now += 0.2
        assert cache.get(key) is MISSING
        assert len(cache) == 0

    def test_method_ttl_override(self):
        clock = FakeClock()
        cache = ResponseCache(default_ttl=30, method_ttls={"get-amount-out": 3600}, clock=clock)
        pool_key = make_key("get-pool")
        math_key = make_key("get-amount-out")
        cache.set(pool_key, "pool")
        cache.set(math_key, 42)
        clock.now += 60
        assert cache.get(pool_key) is MISSING
        assert cache.get(math_key) == 42

    def test_zero_ttl_disables_storage(self):
        cache = ResponseCache(default_ttl=0)
        cache.set(make_key(), "value")
        assert len(cache) == 0

    def test_keys_distinguish_arguments(self):
        cache = ResponseCache()
        cache.set(make_key(args=["0x01"]), "one")
        cache.set(make_key(args=["0x02"]), "two")
        assert cache.get(make_key(args=["0x01"])) == "one"
        assert cache.get(make_key(args=["0x02"])) == "two"

    def test_falsy_values_are_cached(self):
        cache = ResponseCache()
        key = make_key()
        cache.set(key, None)
        assert cache.get(key) is None

    def test_invalidate_and_clear(self):
        cache = ResponseCache()
        key = make_key()
        cache.set(key, "value")
        cache.invalidate(key)
        assert cache.get(key) is MISSING
        cache.set(key, "value")
        cache.clear()
        assert len(cache) == 0
        assert cache.hit_rate == 0.0

    def test_expired_entries_swept_on_write(self):
        clock = FakeClock()
        cache = ResponseCache(default_ttl=30, clock=clock)
        for i in range(10_000):
            cache.set(make_key(args=[f"0x{i:04x}"]), i)
        assert len(cache) == 10_000
        clock.now += 10_000
        cache.set(make_key(args=["0xffff"]), "fresh")
        assert len(cache) == 1
        assert cache.get(make_key(args=["0xffff"])) == "fresh"

    def test_live_entries_survive_sweep(self):
        clock = FakeClock()
        cache = ResponseCache(default_ttl=30, method_ttls={"get-amount-out": 3600}, clock=clock)
        cache.set(make_key("get-pool"), "pool")
        cache.set(make_key("get-amount-out"), 42)
        clock.now += 60
        cache.set(make_key("get-nr-pools"), 3)
        assert len(cache) == 2
        assert cache.get(make_key("get-amount-out")) == 42

    def test_oldest_entry_evicted_when_full(self):
        cache = ResponseCache(max_entries=3)
        keys = [make_key(args=[f"0x0{i}"]) for i in range(4)]
        for i, key in enumerate(keys):
            cache.set(key, i)
        assert len(cache) == 3
        assert cache.get(keys[0]) is MISSING
        assert [cache.get(key) for key in keys[1:]] == [1, 2, 3]
        assert cache.stats["evictions"] == 1

    def test_rewrite_refreshes_eviction_order(self):
        cache = ResponseCache(max_entries=2)
        first, second, third = (make_key(args=[f"0x0{i}"]) for i in range(3))
        cache.set(first, 1)
        cache.set(second, 2)
        cache.set(first, 10)
        cache.set(third, 3)
        assert cache.get(second) is MISSING
        assert cache.get(first) == 10
        assert cache.get(third) == 3

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValueError, match="max_entries"):
            ResponseCache(max_entries=0)
