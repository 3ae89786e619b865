import redis

from app.components.notifications import dedupe
from app.components.notifications.dedupe import (
    InMemoryRecentSendCache,
    RedisRecentSendCache,
    build_recent_send_cache,
    results_key,
    welcome_key,
)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def test_memory_cache_suppresses_within_window():
    clock = FakeClock()
    cache = InMemoryRecentSendCache(window_seconds=300, sweep_probability=0.0, clock=clock)
    assert cache.seen_recently("k") is False
    cache.mark_sent("k")
    clock.now += 299
    assert cache.seen_recently("k") is True
    clock.now += 1
    assert cache.seen_recently("k") is False


def test_memory_cache_sweeps_expired_entries_when_sampled():
    clock = FakeClock()
    cache = InMemoryRecentSendCache(window_seconds=60, sweep_probability=0.1, clock=clock, rand=lambda: 0.05)
    cache.mark_sent("old")
    clock.now += 61
    cache.mark_sent("fresh")
    assert len(cache) == 2
    cache.seen_recently("fresh")
    assert len(cache) == 1


def test_memory_cache_skips_sweep_when_not_sampled():
    clock = FakeClock()
    cache = InMemoryRecentSendCache(window_seconds=60, sweep_probability=0.1, clock=clock, rand=lambda: 0.5)
    cache.mark_sent("old")
    clock.now += 61
    assert cache.seen_recently("old") is False
    assert len(cache) == 1


def test_memory_cache_reset():
    cache = InMemoryRecentSendCache(window_seconds=60)
    cache.mark_sent("k")
    cache.reset()
    assert len(cache) == 0


class FakeRedis:
    def __init__(self, fail=False):
        self.store = {}
        self.ttls = {}
        self.fail = fail

    def exists(self, key):
        if self.fail:
            raise redis.ConnectionError("down")
        return 1 if key in self.store else 0

    def set(self, key, value, ex=None):
        if self.fail:
            raise redis.ConnectionError("down")
        self.store[key] = value
        self.ttls[key] = ex
        return True


def test_redis_cache_uses_prefixed_ttl_keys():
    client = FakeRedis()
    cache = RedisRecentSendCache(client, window_seconds=300)
    assert cache.seen_recently("welcome:a@acme.com") is False
    cache.mark_sent("welcome:a@acme.com")
    assert client.ttls["notify:sent:welcome:a@acme.com"] == 300
    assert cache.seen_recently("welcome:a@acme.com") is True


def test_redis_cache_errors_do_not_block_sending():
    cache = RedisRecentSendCache(FakeRedis(fail=True), window_seconds=300)
    assert cache.seen_recently("k") is False
    cache.mark_sent("k")


def test_build_falls_back_to_memory_when_redis_unreachable(monkeypatch):
    class Unreachable:
        def ping(self):
            raise redis.ConnectionError("refused")

    monkeypatch.setattr(dedupe.settings, "NOTIFICATION_DEDUP_BACKEND", "redis")
    monkeypatch.setattr(dedupe.redis.Redis, "from_url", classmethod(lambda cls, *a, **kw: Unreachable()))
    cache = build_recent_send_cache()
    assert isinstance(cache, InMemoryRecentSendCache)


def test_build_memory_backend(monkeypatch):
    monkeypatch.setattr(dedupe.settings, "NOTIFICATION_DEDUP_BACKEND", "memory")
    monkeypatch.setattr(dedupe.settings, "NOTIFICATION_DEDUP_WINDOW_SECONDS", 42)
    cache = build_recent_send_cache()
    assert isinstance(cache, InMemoryRecentSendCache)
    assert cache.window_seconds == 42


def test_keys_normalise_email():
    assert welcome_key(" Jane@Acme.com ") == "welcome:jane@acme.com"
    assert results_key("Jane@Acme.com", "ev-1") == "results:jane@acme.com:ev-1"
