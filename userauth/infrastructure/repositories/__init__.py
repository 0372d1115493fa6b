from .token_repository import MongoTokenRepository
from .user_repository import MongoUserRepository

__all__ = ["MongoUserRepository", "MongoTokenRepository"]
