from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class CacheService:
    """
    Minimal key/value cache interface used by services.

    ``get`` returns None on a miss, so None itself cannot be cached.
    """

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class NoCacheService(CacheService):
    """Cache that never stores anything."""

    def get(self, key: str) -> Any:
        return None

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        return None

    def remove(self, key: str) -> None:
        return None


class MemoryCacheService(CacheService):
    """
    In-process cache with per-entry expiry.

    Entries are kept in a plain dict. An expired entry is dropped when it is
    read, and every entry that has expired is swept out by the first ``set``
    after each ``default_ttl_seconds`` interval, so keys that are never read
    again do not accumulate. Suitable for a single worker process; each
    process keeps its own copy.
    """

    def __init__(self, default_ttl_seconds: float = 60.0, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._next_purge_at = float("-inf")

    def get(self, key: str) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._entries.pop(key, None)
            logger.debug("Cache entry expired: %s", key)
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        now = self._clock()
        if now >= self._next_purge_at:
            self._purge_expired(now)
        self._entries[key] = (now + ttl, value)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Purged %d expired cache entries", len(expired))
        self._next_purge_at = now + self.default_ttl_seconds

    def __len__(self) -> int:
        return len(self._entries)
