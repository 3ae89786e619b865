"""Recently-sent tracking so the same notification is not sent twice in a window.

Best effort only: the memory backend is per-process and lost on restart, and
neither backend is consulted transactionally with the send itself.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional

import redis

from ...platform.config import settings

logger = logging.getLogger(__name__)


class RecentSendCache(ABC):
    def __init__(self, window_seconds: int) -> None:
        self.window_seconds = window_seconds

    @abstractmethod
    def seen_recently(self, key: str) -> bool: ...

    @abstractmethod
    def mark_sent(self, key: str) -> None: ...

    def reset(self) -> None:  # pragma: no cover - optional
        """Drop all tracked keys (tests)."""


class InMemoryRecentSendCache(RecentSendCache):
    """Dict of key -> last send time, swept of expired keys on a random fraction of checks."""

    def __init__(
        self,
        window_seconds: int,
        sweep_probability: float = 0.1,
        clock: Callable[[], float] = time.time,
        rand: Callable[[], float] = random.random,
    ) -> None:
        super().__init__(window_seconds)
        self.sweep_probability = sweep_probability
        self._clock = clock
        self._rand = rand
        self._sent: Dict[str, float] = {}
        self._lock = threading.Lock()

    def seen_recently(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if self._rand() < self.sweep_probability:
                self._sweep(now)
            sent_at = self._sent.get(key)
            return sent_at is not None and now - sent_at < self.window_seconds

    def mark_sent(self, key: str) -> None:
        with self._lock:
            self._sent[key] = self._clock()

    def _sweep(self, now: float) -> None:
        expired = [k for k, sent_at in self._sent.items() if now - sent_at >= self.window_seconds]
        for k in expired:
            del self._sent[k]

    def __len__(self) -> int:
        return len(self._sent)

    def reset(self) -> None:
        with self._lock:
            self._sent.clear()


class RedisRecentSendCache(RecentSendCache):
    """TTL keys in Redis; shared by every instance and survives restarts."""

    def __init__(self, client: "redis.Redis", window_seconds: int, prefix: str = "notify:sent:") -> None:
        super().__init__(window_seconds)
        self.client = client
        self.prefix = prefix

    def seen_recently(self, key: str) -> bool:
        try:
            return bool(self.client.exists(self.prefix + key))
        except redis.RedisError as exc:
            logger.warning("Redis de-dup lookup failed (%s); treating %s as not sent", exc, key)
            return False

    def mark_sent(self, key: str) -> None:
        try:
            self.client.set(self.prefix + key, "1", ex=self.window_seconds)
        except redis.RedisError as exc:
            logger.warning("Redis de-dup write failed (%s); duplicates for %s possible", exc, key)


_cache_singleton: Optional[RecentSendCache] = None


def build_recent_send_cache() -> RecentSendCache:
    window = settings.NOTIFICATION_DEDUP_WINDOW_SECONDS
    backend = (settings.NOTIFICATION_DEDUP_BACKEND or "memory").strip().lower()
    if backend == "redis" and settings.REDIS_URL:
        try:
            client = redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2, socket_timeout=2)
            client.ping()
            logger.info("Using Redis notification de-dup cache")
            return RedisRecentSendCache(client, window)
        except redis.RedisError as exc:
            logger.warning("Could not initialise Redis de-dup cache: %s", exc)

    logger.info("Using in-memory notification de-dup cache")
    return InMemoryRecentSendCache(window, sweep_probability=settings.NOTIFICATION_DEDUP_SWEEP_PROBABILITY)


def get_recent_send_cache() -> RecentSendCache:
    global _cache_singleton
    if _cache_singleton is None:
        _cache_singleton = build_recent_send_cache()
    return _cache_singleton


def welcome_key(email: str) -> str:
    return f"welcome:{email.strip().lower()}"


def results_key(email: str, evaluation_id: str) -> str:
    return f"results:{email.strip().lower()}:{evaluation_id}"
