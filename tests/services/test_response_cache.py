from linkaudit.services.response_cache import CachedCheck, ResponseCache


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_miss_then_hit():
    cache = ResponseCache()
    assert cache.get("https://example.com/") is None
    check = CachedCheck(200, None)
    cache.set("https://example.com/", check)
    assert cache.get("https://example.com/") is check


def test_entries_expire_after_ttl():
    clock = Clock()
    cache = ResponseCache(ttl_seconds=60, clock=clock)
    cache.set("u", CachedCheck(404, "HTTP_404"))
    clock.now = 60
    assert cache.get("u") is not None
    clock.now = 61
    assert cache.get("u") is None
    assert len(cache) == 0


def test_disabled_cache_never_stores():
    cache = ResponseCache(enabled=False)
    cache.set("u", CachedCheck(200, None))
    assert cache.get("u") is None
    assert len(cache) == 0


def test_lru_eviction():
    cache = ResponseCache(max_size=2)
    cache.set("a", CachedCheck(200, None))
    cache.set("b", CachedCheck(200, None))
    cache.get("a")
    cache.set("c", CachedCheck(200, None))
    assert cache.get("b") is None
    assert cache.get("a") is not None
