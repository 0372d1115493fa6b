"""Application dependency container.

The container builds the long-lived infrastructure objects once per process
(database and Redis clients, repositories, services) and owns their
lifecycle. It is created by the application lifespan and stored on
``app.state.container``; request dependencies resolve from it.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from redis.asyncio import Redis

from userauth.core.config.settings import Settings, settings
from userauth.core.logging import logger
from userauth.domain.events import DomainEventBus
from userauth.domain.interfaces import (
    IEmailService,
    IJWTTokenGenerator,
    IPasswordHasher,
    ITokenBlackList,
    ITokenGenerator,
    ITokenRepository,
    IUserRepository,
)
from userauth.domain.use_cases import AbstractOperation
from userauth.infrastructure.database import create_mongo_client, ensure_indexes, wait_for_database
from userauth.infrastructure.redis import create_redis_client
from userauth.infrastructure.repositories import MongoTokenRepository, MongoUserRepository
from userauth.infrastructure.services import (
    EmailService,
    JWTTokenGenerator,
    PasswordHasher,
    TokenBlackList,
    VerificationTokenGenerator,
)


class Container:
    """Holds the concrete implementation behind every domain interface."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        mongo_client: Optional[AsyncIOMotorClient] = None,
        redis: Optional[Redis] = None,
        event_bus: Optional[DomainEventBus] = None,
    ):
        self.settings = config or settings
        if event_bus is not None:
            # operations publish and subscribe through this class attribute
            AbstractOperation.event_bus = event_bus
        self.event_bus = AbstractOperation.event_bus

        self.mongo_client = mongo_client or create_mongo_client(self.settings)
        self.database = self.mongo_client[self.settings.MONGODB_DB]
        self.redis = redis or create_redis_client(self.settings)

        self.user_repository: IUserRepository = MongoUserRepository(self.database)
        self.token_repository: ITokenRepository = MongoTokenRepository(self.database)

        self.password_hasher: IPasswordHasher = PasswordHasher(self.settings.BCRYPT_ROUNDS)
        self.jwt_token_generator: IJWTTokenGenerator = JWTTokenGenerator(self.settings)
        self.token_generator: ITokenGenerator = VerificationTokenGenerator()
        self.token_blacklist: ITokenBlackList = TokenBlackList(self.redis)
        self.email_service: IEmailService = EmailService(self.settings)

    async def startup(self) -> None:
        """Waits for MongoDB (with retries) and makes sure the indexes exist."""
        await wait_for_database(self.database)
        await ensure_indexes(self.database)
        logger.info("container_started", database=self.settings.MONGODB_DB)

    async def shutdown(self) -> None:
        """Lets in-flight event handlers finish, then closes the clients."""
        await self.event_bus.drain()
        self.event_bus.clear()
        self.mongo_client.close()
        await self.redis.aclose()
        logger.info("container_stopped")
