"""
Key-Value Services
==================
Redis connection management and the section document store.
"""

from club_cms.services.kv.redis_manager import RedisManager
from club_cms.services.kv.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
    build_kv_store,
)


__all__ = [
    "RedisManager",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "build_kv_store",
]
