import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class CachedCheck:
    """What a link check found, minus the body."""
    status_code: Optional[int]
    broken_reason: Optional[str]
    content_type: Optional[str] = None


@dataclass(frozen=True)
class _CacheEntry:
    check: CachedCheck
    stored_at: float


class ResponseCache:
    """
    Cache of link check outcomes keyed by URL (fragment stripped by the caller).

    - `ttl_seconds` bounds staleness; entries older than TTL are treated as missing.
    - `max_size` bounds the number of URLs cached (LRU eviction).
    - `enabled=False` turns every lookup into a miss and every store into a no-op.
    """

    def __init__(self, *, ttl_seconds: int = 3 * 60 * 60, max_size: int = 50_000, enabled: bool = True, clock: Callable[[], float] = time.monotonic):
        self._ttl_seconds = max(0, int(ttl_seconds))
        self._max_size = max(1, int(max_size))
        self._enabled = bool(enabled)
        self._clock = clock
        self._cache: "OrderedDict[str, _CacheEntry]" = OrderedDict()

    def _is_expired(self, entry: _CacheEntry) -> bool:
        if self._ttl_seconds == 0:
            return True
        return (self._clock() - entry.stored_at) > self._ttl_seconds

    def get(self, url: str) -> Optional[CachedCheck]:
        if not self._enabled:
            return None
        entry = self._cache.get(url)
        if entry is None:
            return None
        if self._is_expired(entry):
            self._cache.pop(url, None)
            return None
        self._cache.move_to_end(url)
        return entry.check

    def set(self, url: str, check: CachedCheck) -> None:
        if not self._enabled:
            return
        self._cache[url] = _CacheEntry(check=check, stored_at=self._clock())
        self._cache.move_to_end(url)
        while len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def __len__(self) -> int:
        return len(self._cache)
