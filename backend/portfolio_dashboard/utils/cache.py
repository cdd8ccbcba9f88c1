# backend/portfolio_dashboard/utils/cache.py
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from portfolio_dashboard.utils.logger import setup_logger

logger = setup_logger(__name__)

PRICE_NAMESPACE = "price"
FUNDAMENTALS_NAMESPACE = "fundamentals"


@dataclass(frozen=True)
class CacheNamespace:
    ttl_seconds: float
    check_period_seconds: float


class ExpiringCache:
    """In-memory key/value store whose entries expire after a TTL.

    Expired entries read as absent immediately; they are physically dropped by
    a sweep that runs at most once per ``check_period_seconds``, piggybacking
    on ``get``/``set`` calls.
    """

    def __init__(self, ttl_seconds: float, check_period_seconds: float = 0,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.check_period_seconds = check_period_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._last_sweep = clock()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            entry = self._entries.get(key)
            if entry is None or entry[1] <= now:
                self.misses += 1
                return None
            self.hits += 1
            return entry[0]

    def set(self, key: Hashable, value: Any, ttl_seconds: Optional[float] = None):
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            self._entries[key] = (value, now + ttl)

    def delete(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def sweep(self) -> int:
        """Drop expired entries, returning how many were removed."""
        with self._lock:
            return self._sweep(self._clock())

    def clear(self):
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "keys": len(self._entries),
                "hits": self.hits,
                "misses": self.misses,
                "ttl_seconds": self.ttl_seconds,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _maybe_sweep(self, now: float):
        if now - self._last_sweep >= self.check_period_seconds:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        return len(expired)


class QuoteCache:
    """A set of named ExpiringCaches, each with its own TTL and sweep interval.

    Created once at application startup and cleared at shutdown.
    """

    def __init__(self, namespaces: Dict[str, CacheNamespace],
                 clock: Callable[[], float] = time.monotonic):
        self._caches: Dict[str, ExpiringCache] = {
            name: ExpiringCache(ns.ttl_seconds, ns.check_period_seconds, clock=clock)
            for name, ns in namespaces.items()
        }

    def namespace(self, name: str) -> ExpiringCache:
        try:
            return self._caches[name]
        except KeyError:
            raise KeyError(f"Unknown cache namespace: {name}") from None

    def get(self, namespace: str, key: Hashable) -> Optional[Any]:
        return self.namespace(namespace).get(key)

    def set(self, namespace: str, key: Hashable, value: Any, ttl_seconds: Optional[float] = None):
        self.namespace(namespace).set(key, value, ttl_seconds)

    def clear(self):
        for cache in self._caches.values():
            cache.clear()
        logger.info("Quote cache cleared")

    def stats(self) -> Dict[str, Dict[str, Any]]:
        return {name: cache.stats() for name, cache in self._caches.items()}


def build_quote_cache(settings) -> QuoteCache:
    """Create the price and fundamentals namespaces from settings."""
    return QuoteCache({
        PRICE_NAMESPACE: CacheNamespace(
            ttl_seconds=settings.price_cache_ttl,
            check_period_seconds=settings.price_cache_check_period,
        ),
        FUNDAMENTALS_NAMESPACE: CacheNamespace(
            ttl_seconds=settings.fundamentals_cache_ttl,
            check_period_seconds=settings.fundamentals_cache_check_period,
        ),
    })
