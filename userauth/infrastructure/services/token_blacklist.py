"""Revoked JWTs kept in Redis until they would have expired anyway."""

import structlog
from redis.asyncio import Redis

from userauth.domain.interfaces import ITokenBlackList

logger = structlog.get_logger(__name__)

BLACKLIST_PREFIX = "token:blacklist:"
BLACKLIST_VALUE = "blacklisted"


class TokenBlackList(ITokenBlackList):
    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def key(token: str) -> str:
        return f"{BLACKLIST_PREFIX}{token}"

    async def add(self, token: str, ttl_seconds: int) -> None:
        await self.redis.setex(self.key(token), ttl_seconds, BLACKLIST_VALUE)
        logger.debug("Token blacklisted", ttl_seconds=ttl_seconds)

    async def is_blacklisted(self, token: str) -> bool:
        return bool(await self.redis.exists(self.key(token)))
