import time
from typing import Any, Optional

from .config import get_settings


class TTLCache:
    """Tiny key -> value cache with a fixed time-to-live.

    Not synchronised. Expired entries are dropped when read and on every put.
    """

    def __init__(self, ttl_seconds: float, clock=time.monotonic):
        self.ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: Any) -> None:
        if self.ttl <= 0:
            return
        now = self._clock()
        self.evict_expired(now)
        self._entries[key] = (now + self.ttl, value)

    def evict_expired(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


_recordings_cache: Optional[TTLCache] = None


def recordings_cache() -> TTLCache:
    """Process-wide cache of the recordings list, keyed by request URL."""
    global _recordings_cache
    if _recordings_cache is None:
        _recordings_cache = TTLCache(get_settings().recordings_cache_ttl)
    return _recordings_cache
