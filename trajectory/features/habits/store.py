"""
trajectory/features/habits/store.py

Key-value storage for the persisted habit registry.

One key holds the whole registry as a JSON string. Two backends share the
same contract:
- InMemoryStore: process-local dict (default, tests)
- RedisStore: durable across restarts when REDIS_URL is configured
"""

import logging
from typing import Dict, Optional

from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger("trajectory")


class KeyValueStore:
    """Minimal string key-value contract used by the registry."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryStore(KeyValueStore):
    """Process-local store. Contents are lost on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class RedisStore(KeyValueStore):
    """Redis-backed store. Values are stored as UTF-8 strings."""

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisStore":
        return cls(Redis.from_url(url, decode_responses=True))

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    def get(self, key: str) -> Optional[str]:
        value = self._client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)


def get_registry_store(redis_url: Optional[str] = None) -> KeyValueStore:
    """
    Get the appropriate registry store implementation.

    - Redis when a URL is configured and the server answers PING
    - In-memory otherwise (including when Redis is unreachable)

    Args:
        redis_url: Redis connection URL (optional)

    Returns:
        RedisStore or InMemoryStore instance
    """
    if redis_url:
        try:
            store = RedisStore.from_url(redis_url)
            if store.ping():
                logger.info("registry.store", extra={"backend": "redis"})
                return store
            logger.warning("[registry_store] Redis unavailable, falling back to in-memory")
        except (RedisError, ValueError) as e:
            logger.warning(f"[registry_store] Failed to initialize Redis store: {e}")
            logger.warning("[registry_store] Falling back to in-memory")

    return InMemoryStore()
