"""
Centralized Redis Client Manager

Provides a single source of truth for the Redis connection used by the
conversation store and the product index, with connection pooling and
centralized configuration.
"""

import redis.asyncio as async_redis
from typing import Optional

from config import REDIS_URL
from logger_config import logger


class RedisClientManager:
    """Singleton Redis client manager with proper connection pooling"""

    _async_client: Optional[async_redis.Redis] = None
    _connection_url: str = REDIS_URL

    @classmethod
    def get_async_client(cls) -> async_redis.Redis:
        """
        Get asynchronous Redis client with connection pooling

        Returns:
            async_redis.Redis: Configured async Redis client
        """
        if cls._async_client is None:
            cls._async_client = async_redis.Redis.from_url(cls._connection_url, decode_responses=True)
            logger.info("✅ Created async Redis client with connection pooling")
        return cls._async_client

    @classmethod
    async def close_connections(cls):
        """Close all Redis connections properly"""
        if cls._async_client:
            await cls._async_client.aclose()
            cls._async_client = None
            logger.info("🔒 Closed async Redis client")

    @classmethod
    def get_connection_info(cls) -> dict:
        """Get Redis connection configuration (without password)"""
        url = cls._connection_url
        if "@" in url:
            scheme, rest = url.split("://", 1)
            url = f"{scheme}://***@{rest.split('@', 1)[1]}"
        return {"url": url}


def get_async_redis_client() -> async_redis.Redis:
    """Get async Redis client for async operations"""
    return RedisClientManager.get_async_client()
