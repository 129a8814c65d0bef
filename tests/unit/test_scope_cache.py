"""Unit tests for ScopeCache expiry, eviction and per-scope locks."""

import pytest

from src.tb_common.scope_cache import ScopeCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestExpiry:
    def test_entry_expires_after_ttl(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=60, max_entries=10, clock=clock)
        cache.put("u1", "ledger")

        clock.now += 59
        assert cache.get("u1") == "ledger"
        clock.now += 1
        assert cache.get("u1") is None
        assert "u1" not in cache

    def test_put_purges_expired_entries(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=60, max_entries=10, clock=clock)
        cache.put("u1", "a")
        cache.put("u2", "b")
        clock.now += 120

        cache.put("u3", "c")

        assert len(cache) == 1
        assert "u3" in cache

    def test_unsaved_entry_never_expires(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=60, max_entries=10, clock=clock)
        cache.put("u1", "ledger")
        cache.mark_saved("u1", False)

        clock.now += 3600

        assert cache.get("u1") == "ledger"
        assert cache.get_unsaved("u1") == "ledger"

    def test_successful_save_restarts_ttl(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=60, max_entries=10, clock=clock)
        cache.put("u1", "ledger")
        cache.mark_saved("u1", False)
        clock.now += 3600

        cache.mark_saved("u1", True)

        assert cache.get_unsaved("u1") is None
        clock.now += 30
        assert cache.get("u1") == "ledger"
        clock.now += 30
        assert cache.get("u1") is None


class TestEviction:
    def test_least_recently_used_evicted(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=600, max_entries=2, clock=clock)
        cache.put("u1", "a")
        cache.put("u2", "b")
        cache.get("u1")

        cache.put("u3", "c")

        assert "u1" in cache
        assert "u2" not in cache
        assert "u3" in cache

    def test_unsaved_entries_survive_eviction(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=600, max_entries=1, clock=clock)
        cache.put("u1", "a")
        cache.mark_saved("u1", False)

        cache.put("u2", "b")

        assert cache.get("u1") == "a"

    def test_drop(self, clock) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=600, max_entries=10, clock=clock)
        cache.put("u1", "a")
        cache.drop("u1")
        cache.drop("missing")
        assert cache.get("u1") is None


class TestLocks:
    async def test_same_scope_shares_lock_while_held(self) -> None:
        cache: ScopeCache[str] = ScopeCache(ttl_seconds=600, max_entries=10)
        lock = cache.lock("u1")
        async with lock:
            assert cache.lock("u1") is lock
            assert cache.lock("u2") is not lock
