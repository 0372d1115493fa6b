"""
Redis Connection Module

This module provides the asynchronous Redis client used for the token
blacklist. The client is created once by the dependency container and closed
on shutdown.
"""

from typing import Optional

from redis.asyncio import Redis

from userauth.core.config.settings import Settings, settings
from userauth.core.logging import logger


def create_redis_client(config: Optional[Settings] = None) -> Redis:
    """Creates a Redis client from ``REDIS_URL``. Connections open lazily."""
    config = config or settings
    client = Redis.from_url(config.REDIS_URL, encoding="utf-8", decode_responses=True)
    logger.debug("redis_client_created", host=config.REDIS_HOST, port=config.REDIS_PORT)
    return client


async def check_redis_health(client: Redis) -> bool:
    try:
        return bool(await client.ping())
    except Exception as e:
        logger.error("redis_health_check_failed", error=str(e))
        return False

