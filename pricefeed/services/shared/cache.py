"""In-process TTL cache store shared by provider adapters.

Entries are written once and read many times until they expire. Expired
entries are evicted when they are read and swept out on every write. The
store holds at most ``maxsize`` entries; past that the oldest write is
evicted first.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from pricefeed.config import settings

logger = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 1024


def _to_seconds(expires_in: float | timedelta | None) -> float | None:
    if isinstance(expires_in, timedelta):
        return expires_in.total_seconds()
    return expires_in


class MemoryCache:
    """Thread-safe, size-bounded key/value store with per-entry expiry.

    Usage:
        cache = MemoryCache(maxsize=512)
        cache.write("coingecko_search_BTC", results, expires_in=timedelta(minutes=5))
        cache.read("coingecko_search_BTC")
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAXSIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._clock = clock
        # Insertion order is write order: the first entry is the oldest
        self._entries: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._lock = threading.Lock()

    def read(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return value

    def write(self, key: str, value: Any, expires_in: float | timedelta | None = None) -> None:
        """Store a value, replacing any existing entry.

        Args:
            key: Cache key
            value: Value to store
            expires_in: Lifetime in seconds or as a timedelta; None never expires
        """
        seconds = _to_seconds(expires_in)
        with self._lock:
            now = self._clock()
            self._purge_expired(now)

            self._entries.pop(key, None)
            self._entries[key] = (value, now + seconds if seconds is not None else None)

            while len(self._entries) > self.maxsize:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted oldest entry: {evicted}")

    def fetch(
        self,
        key: str,
        factory: Callable[[], Any],
        expires_in: float | timedelta | None = None,
    ) -> Any:
        """Read through the cache, computing and storing the value on a miss.

        None results from the factory are not cached.
        """
        value = self.read(key)
        if value is not None:
            return value

        value = factory()
        if value is not None:
            self.write(key, value, expires_in=expires_in)
        return value

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        with self._lock:
            return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        expired = [
            key
            for key, (_, expires_at) in self._entries.items()
            if expires_at is not None and now >= expires_at
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Shared cache store - used by providers unless one is injected
cache = MemoryCache(maxsize=settings.provider_cache_maxsize)
