"""Lightweight in-memory TTL cache for the scheme monitor.

Provides the TTLCache used by the house and officer stores.  Keys are plain
strings such as ``"all-houses"`` or ``"house-12"`` so a whole family of
entries can be dropped with :meth:`TTLCache.invalidate_prefix` after a write.
"""

import threading
import time
from typing import Any, Callable


class TTLCache:
    """Thread-safe in-memory cache with time-to-live (TTL) expiry.

    Entries expire after ``ttl_seconds`` seconds. A maximum of ``maxsize``
    entries are retained; when the cache is full the oldest entry is evicted.

    The clock is injectable so tests can move time forward without sleeping.

    Usage::

        cache = TTLCache(maxsize=128, ttl_seconds=60)
        cache.set("all-houses", houses)
        value = cache.get("all-houses")  # returns list or None if expired/missing
    """

    def __init__(
        self,
        maxsize: int = 128,
        ttl_seconds: float = 60.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialise the cache.

        Args:
            maxsize: Maximum number of entries to store (default 128).
            ttl_seconds: Seconds before a cached entry expires (default 60).
            clock: Zero-argument callable returning seconds; defaults to
                ``time.monotonic``.
        """
        self._maxsize = maxsize
        self._ttl = ttl_seconds
        self._clock = clock or time.monotonic
        # Maps key -> (value, expires_at)
        self._store: dict[Any, tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: Any) -> Any | None:
        """Return cached value for *key*, or ``None`` if absent or expired.

        Args:
            key: Cache key (must be hashable).

        Returns:
            Cached value, or ``None``.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._store[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key* with the configured TTL.

        If the cache is full, the entry with the earliest expiry is evicted
        before inserting the new one.

        Args:
            key: Cache key (must be hashable).
            value: Value to cache (any type).
        """
        expires_at = self._clock() + self._ttl
        with self._lock:
            if key not in self._store and len(self._store) >= self._maxsize:
                # Evict the entry that expires soonest
                oldest_key = min(self._store, key=lambda k: self._store[k][1])
                del self._store[oldest_key]
            self._store[key] = (value, expires_at)

    def invalidate_prefix(self, *prefixes: str) -> int:
        """Remove every string key starting with any of *prefixes*.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            doomed = [
                k for k in self._store
                if isinstance(k, str) and k.startswith(prefixes)
            ]
            for k in doomed:
                del self._store[k]
            return len(doomed)

    def stats(self) -> dict[str, int]:
        """Return cache statistics.

        Returns:
            Dict with keys ``hits``, ``misses``, and ``size``.
        """
        with self._lock:
            # Purge expired entries before reporting size
            now = self._clock()
            expired = [k for k, (_, exp) in self._store.items() if now >= exp]
            for k in expired:
                del self._store[k]
            return {
                "hits": self._hits,
                "misses": self._misses,
                "size": len(self._store),
            }
