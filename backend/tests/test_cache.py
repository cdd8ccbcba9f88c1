import pytest

from portfolio_dashboard.utils.cache import (
    FUNDAMENTALS_NAMESPACE, PRICE_NAMESPACE, CacheNamespace, ExpiringCache, QuoteCache
)

from conftest import FakeClock


def test_entry_expires_after_ttl():
    clock = FakeClock()
    cache = ExpiringCache(ttl_seconds=15, check_period_seconds=5, clock=clock)

    cache.set("MSFT", 410.0)
    clock.advance(14)
    assert cache.get("MSFT") == 410.0

    clock.advance(1)
    assert cache.get("MSFT") is None


def test_explicit_ttl_overrides_default():
    clock = FakeClock()
    cache = ExpiringCache(ttl_seconds=15, clock=clock)

    cache.set("MSFT", 410.0, ttl_seconds=60)
    clock.advance(30)
    assert cache.get("MSFT") == 410.0


def test_sweep_respects_check_period():
    clock = FakeClock()
    cache = ExpiringCache(ttl_seconds=1, check_period_seconds=10, clock=clock)

    cache.set("A", 1)
    cache.set("B", 2)
    clock.advance(2)

    # Expired but not yet swept
    assert cache.get("A") is None
    assert len(cache) == 2

    clock.advance(10)
    cache.get("A")
    assert len(cache) == 0


def test_manual_sweep_returns_removed_count():
    clock = FakeClock()
    cache = ExpiringCache(ttl_seconds=5, check_period_seconds=100, clock=clock)
    cache.set("A", 1)
    cache.set("B", 2, ttl_seconds=50)
    clock.advance(6)

    assert cache.sweep() == 1
    assert cache.get("B") == 2


def test_stats_track_hits_and_misses():
    cache = ExpiringCache(ttl_seconds=15, clock=FakeClock())
    cache.set("A", 1)
    cache.get("A")
    cache.get("missing")

    stats = cache.stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["keys"] == 1

    cache.clear()
    assert cache.stats() == {"keys": 0, "hits": 0, "misses": 0, "ttl_seconds": 15}


def test_namespaces_have_independent_ttls():
    clock = FakeClock()
    cache = QuoteCache({
        PRICE_NAMESPACE: CacheNamespace(ttl_seconds=15, check_period_seconds=5),
        FUNDAMENTALS_NAMESPACE: CacheNamespace(ttl_seconds=3600, check_period_seconds=600),
    }, clock=clock)

    cache.set(PRICE_NAMESPACE, "MSFT", 410.0)
    cache.set(FUNDAMENTALS_NAMESPACE, "MSFT", {"peRatio": 35.2})
    clock.advance(60)

    assert cache.get(PRICE_NAMESPACE, "MSFT") is None
    assert cache.get(FUNDAMENTALS_NAMESPACE, "MSFT") == {"peRatio": 35.2}


def test_same_key_in_different_namespaces_does_not_collide():
    cache = QuoteCache({
        "a": CacheNamespace(ttl_seconds=10, check_period_seconds=1),
        "b": CacheNamespace(ttl_seconds=10, check_period_seconds=1),
    }, clock=FakeClock())
    cache.set("a", "X", 1)
    cache.set("b", "X", 2)
    assert cache.get("a", "X") == 1
    assert cache.get("b", "X") == 2


def test_unknown_namespace_raises():
    cache = QuoteCache({PRICE_NAMESPACE: CacheNamespace(15, 5)})
    with pytest.raises(KeyError):
        cache.get("quotes", "MSFT")


def test_built_cache_uses_configured_ttls(quote_cache):
    stats = quote_cache.stats()
    assert stats[PRICE_NAMESPACE]["ttl_seconds"] == 15
    assert stats[FUNDAMENTALS_NAMESPACE]["ttl_seconds"] == 3600
