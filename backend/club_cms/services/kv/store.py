"""
Key-Value Stores
================
Narrow get/put interface over the store that holds section documents.

Values are opaque strings; JSON encoding belongs to the caller.
"""

from typing import Any, Dict, Optional, Protocol

from redis.exceptions import RedisError

from club_cms.core.logging_config import get_logger
from club_cms.services.kv.redis_manager import RedisManager


logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Capability required by the content service"""

    backend: str

    async def get(self, key: str) -> Optional[str]:
        ...

    async def put(self, key: str, value: str) -> None:
        ...

    async def ping(self) -> bool:
        ...


class RedisKeyValueStore:
    """
    Redis-backed store

    Keys are namespaced with a prefix so the content documents can share a
    Redis database. Errors propagate; callers decide how to report them.
    """

    backend = "redis"

    def __init__(self, manager: RedisManager, key_prefix: str = ""):
        self._manager = manager
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        client = self._manager.get_client()
        try:
            value = await client.get(self._key(key))
        except RedisError as e:
            logger.error("Redis get error for key '{}': {}", key, e)
            raise

        if value is None:
            logger.debug("KV miss: {}", key)
        return value

    async def put(self, key: str, value: str) -> None:
        client = self._manager.get_client()
        try:
            await client.set(self._key(key), value)
        except RedisError as e:
            logger.error("Redis set error for key '{}': {}", key, e)
            raise
        logger.debug("KV set: {}", key)

    async def ping(self) -> bool:
        return await self._manager.health_check()

    async def server_info(self) -> Dict[str, Any]:
        """Redis version and load, empty when unavailable"""
        return await self._manager.get_info()


class MemoryKeyValueStore:
    """Process-local store for development and tests"""

    backend = "memory"

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def put(self, key: str, value: str) -> None:
        self._data[key] = value

    async def ping(self) -> bool:
        return True

    def snapshot(self) -> Dict[str, str]:
        """Copy of the stored values"""
        return dict(self._data)


def build_kv_store(manager: RedisManager) -> KeyValueStore:
    """
    Pick the key-value store for the current configuration

    Args:
        manager: Redis manager, already connected when Redis is enabled

    Returns:
        KeyValueStore: Redis when enabled, process memory otherwise
    """
    if manager.settings.REDIS_ENABLE:
        return RedisKeyValueStore(manager, key_prefix=manager.settings.CONTENT_KEY_PREFIX)

    logger.warning("Redis disabled. Content is kept in process memory and lost on restart.")
    return MemoryKeyValueStore()
