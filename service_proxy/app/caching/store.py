"""
Key-value store protocol and its Redis implementation.
"""

from __future__ import annotations

import abc
from datetime import timedelta
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from shared.errors import StoreCorrupt, StoreUnavailable
from shared.logging import get_logger


class KeyValueStore(abc.ABC):
    """String-keyed, string-valued store with per-key TTL.

    ``get`` returns None for an absent key and raises StoreUnavailable for
    transport failures, so the two are never confused. Implementations must
    be safe to share between concurrent requests.
    """

    @abc.abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key`` or None when absent."""

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        """Store ``value`` under ``key``, expiring after ``ttl``."""

    @abc.abstractmethod
    async def ping(self) -> None:
        """Raise StoreUnavailable unless the store answers."""

    async def close(self) -> None:
        """Release connections held by the store."""


class RedisStore(KeyValueStore):
    """KeyValueStore backed by a Redis-compatible server."""

    def __init__(self, client: redis.Redis):
        self._redis = client
        self.logger = get_logger("proxy.store.redis")

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        *,
        password: Optional[str] = None,
        db: int = 0,
        socket_timeout: Optional[float] = None,
    ) -> "RedisStore":
        """Build a store from a redis:// URL.

        ``password`` and ``db`` apply unless the URL itself carries them.
        """
        client = redis.from_url(
            redis_url,
            password=password,
            db=db,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(key)
        except RedisError as exc:
            raise StoreUnavailable("Redis GET failed", details={"key": key}) from exc
        except UnicodeDecodeError as exc:
            raise StoreCorrupt("Stored value is not valid UTF-8", details={"key": key}) from exc

    async def set(self, key: str, value: str, ttl: timedelta) -> None:
        # Millisecond precision so sub-second TTLs are honoured
        ttl_ms = max(1, int(ttl.total_seconds() * 1000))
        try:
            await self._redis.set(key, value, px=ttl_ms)
        except RedisError as exc:
            raise StoreUnavailable("Redis SET failed", details={"key": key}) from exc

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except RedisError as exc:
            raise StoreUnavailable("Redis did not answer PING") from exc

    async def close(self) -> None:
        await self._redis.aclose()
        self.logger.info("Redis store closed")
