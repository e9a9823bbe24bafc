"""In-memory TTL cache for upstream feeds and live search sessions."""

from typing import Any, Dict, Optional, Tuple
import time

from ..config import settings


class CacheService:
    """Simple in-memory cache with TTL support and an optional size cap.

    Entries expire on a monotonic clock so wall-clock adjustments do not
    resurrect or evict feed data early. With ``max_entries`` set, writing
    past the cap drops expired entries first, then the least recently
    written ones.
    """

    def __init__(self, enabled: Optional[bool] = None, max_entries: Optional[int] = None):
        # Insertion order doubles as write recency
        self._cache: Dict[str, Tuple[Any, float]] = {}
        self._enabled = settings.cache_enabled if enabled is None else enabled
        self._max_entries = max_entries

    @property
    def enabled(self) -> bool:
        return self._enabled

    def __len__(self) -> int:
        return len(self._cache)

    async def get(self, key: str) -> Optional[Any]:
        """Return the live value for ``key``, or None once it has expired."""
        if not self._enabled:
            return None

        entry = self._cache.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if time.monotonic() < expires_at:
            return value

        del self._cache[key]
        return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> None:
        """
        Store ``value`` for ``ttl`` seconds.

        Writing an existing key renews its expiry and makes it the most
        recent entry.
        """
        if not self._enabled or ttl <= 0:
            return

        self._cache.pop(key, None)
        self._cache[key] = (value, time.monotonic() + ttl)

        if self._max_entries is not None and len(self._cache) > self._max_entries:
            await self.cleanup_expired()
            while len(self._cache) > self._max_entries:
                del self._cache[next(iter(self._cache))]

    async def delete(self, key: str) -> None:
        self._cache.pop(key, None)

    async def clear(self) -> None:
        self._cache.clear()

    async def cleanup_expired(self) -> None:
        """Drop every entry whose TTL has run out."""
        now = time.monotonic()
        self._cache = {
            key: entry for key, entry in self._cache.items() if entry[1] > now
        }
