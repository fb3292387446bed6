from __future__ import annotations

import redis

from tableside.application.ports.cache import CacheStore
from tableside.infrastructure.cache.redis_client import get_redis_client


class RedisCacheStore(CacheStore):
    """String cache on Redis.

    The client is resolved on first use, so building a store never touches
    the network or the environment. Errors propagate; callers decide whether
    a cache miss is acceptable.
    """

    def __init__(self, client: redis.Redis | None = None, *, timeout_seconds: float = 1.0) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds

    def _redis(self) -> redis.Redis:
        if self._client is None:
            self._client = get_redis_client(timeout_seconds=self._timeout_seconds)
        return self._client

    def get(self, key: str) -> str | None:
        return self._redis().get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._redis().set(key, value, ex=max(1, ttl_seconds))

    def delete(self, key: str) -> None:
        self._redis().delete(key)
