"""
MongoDB infrastructure module.

This module provides the core database functionality including:
- Motor client configuration with connection pooling
- Health check mechanisms
- Startup connectivity check and index creation with retry logic

Collections and their indexes:
- ``users``: unique ``email``, unique ``username``
- ``tokens``: unique ``token``, ``(user_id, type, is_revoked)`` for the active
  token lookups and ``(expires_at, is_revoked)`` for expired token cleanup
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, IndexModel
from pymongo.errors import ConnectionFailure, PyMongoError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from userauth.core.config.settings import Settings, settings
from userauth.core.logging import logger

USERS_COLLECTION = "users"
TOKENS_COLLECTION = "tokens"

USER_INDEXES = [
    IndexModel([("email", ASCENDING)], unique=True, name="email_unique"),
    IndexModel([("username", ASCENDING)], unique=True, name="username_unique"),
]

TOKEN_INDEXES = [
    IndexModel([("token", ASCENDING)], unique=True, name="token_unique"),
    IndexModel(
        [("user_id", ASCENDING), ("type", ASCENDING), ("is_revoked", ASCENDING)],
        name="user_type_revoked",
    ),
    IndexModel([("expires_at", ASCENDING), ("is_revoked", ASCENDING)], name="expires_revoked"),
]


def create_mongo_client(config: Optional[Settings] = None) -> AsyncIOMotorClient:
    """Creates the motor client. No connection is opened until first use."""
    config = config or settings
    if config.MONGODB_DEBUG:
        # pymongo logs every command at DEBUG level
        logging.getLogger("pymongo.command").setLevel(logging.DEBUG)
    return AsyncIOMotorClient(
        config.MONGODB_URL,
        maxPoolSize=config.MONGODB_MAX_POOL_SIZE,
        serverSelectionTimeoutMS=config.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
        tz_aware=True,
    )


async def check_database_health(database: AsyncIOMotorDatabase) -> bool:
    """
    Performs a health check on the database connection.

    Returns:
        bool: True if the server answers a ``ping``, False otherwise
    """
    try:
        await database.command("ping")
        return True
    except PyMongoError as e:
        logger.error("database_health_check_failed", error=str(e))
        return False


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=4, max=10),
    retry=retry_if_exception_type(ConnectionFailure),
    reraise=True,
)
async def wait_for_database(database: AsyncIOMotorDatabase) -> None:
    """
    Blocks until MongoDB answers a ``ping``, retrying with exponential backoff.

    Raises:
        ConnectionFailure: If the server is still unreachable after all attempts
    """
    try:
        await database.command("ping")
        logger.info("database_connection_established", database=database.name)
    except ConnectionFailure as e:
        logger.warning("database_connection_retry", error=str(e))
        raise


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Creates the collection indexes. Existing indexes are left as they are."""
    try:
        await database[USERS_COLLECTION].create_indexes(USER_INDEXES)
        await database[TOKENS_COLLECTION].create_indexes(TOKEN_INDEXES)
        logger.info("database_indexes_ensured")
    except PyMongoError as e:
        logger.error("database_index_creation_failed", error=str(e))
        raise
