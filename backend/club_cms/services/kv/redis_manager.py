"""
Redis Connection Manager
========================
Handles Redis connection lifecycle using redis-py (async).
"""

from typing import Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import ConnectionError, TimeoutError

from club_cms.core.config import Settings, settings as default_settings
from club_cms.core.logging_config import get_logger


logger = get_logger(__name__)


class RedisManager:
    """
    Redis Connection Manager

    Manages the Redis connection lifecycle:
    - Connection initialization
    - Connection pooling
    - Health checks
    - Graceful shutdown
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.client: Optional[Redis] = None
        self._pool: Optional[redis.ConnectionPool] = None

    async def connect(self) -> None:
        """
        Connect to Redis

        Raises:
            ConnectionError: If connection fails in production
        """
        if not self.settings.REDIS_ENABLE:
            logger.info("Redis is disabled in configuration")
            return

        try:
            logger.info("Connecting to Redis: {}", self.settings.REDIS_URL)

            self._pool = redis.ConnectionPool.from_url(
                self.settings.redis_connection_url,
                max_connections=self.settings.REDIS_MAX_CONNECTIONS,
                decode_responses=True,
            )
            self.client = redis.Redis(connection_pool=self._pool)

            # Verify connection
            await self.client.ping()

            logger.bind(max_connections=self.settings.REDIS_MAX_CONNECTIONS).info(
                "✅ Connected to Redis"
            )

        except (ConnectionError, TimeoutError) as e:
            logger.error("❌ Failed to connect to Redis: {}", e)
            if self.settings.is_production:
                raise
            logger.warning("Redis connection failed but continuing (development mode)")

    async def disconnect(self) -> None:
        """Disconnect from Redis"""
        if self.client:
            logger.info("Closing Redis connection...")
            await self.client.aclose()
            if self._pool:
                await self._pool.disconnect()
            self.client = None
            self._pool = None
            logger.info("✅ Redis connection closed")

    async def health_check(self) -> bool:
        """
        Check if Redis connection is healthy

        Returns:
            bool: True if healthy, False otherwise
        """
        if not self.settings.REDIS_ENABLE or not self.client:
            return False

        try:
            return await self.client.ping() is True
        except Exception as e:
            logger.error("Redis health check failed: {}", e)
            return False

    def get_client(self) -> Redis:
        """
        Get the Redis client instance

        Returns:
            Redis: Redis client

        Raises:
            RuntimeError: If not connected
        """
        if not self.client:
            raise RuntimeError("Redis not connected. Call connect() first or enable Redis in config.")
        return self.client

    async def get_info(self) -> dict:
        """
        Get Redis server information

        Returns:
            dict: Redis server info
        """
        if not self.client:
            return {}

        try:
            info = await self.client.info()
            return {
                "version": info.get("redis_version"),
                "connected_clients": info.get("connected_clients"),
                "used_memory_human": info.get("used_memory_human"),
            }
        except Exception as e:
            logger.error("Failed to get Redis info: {}", e)
            return {}
