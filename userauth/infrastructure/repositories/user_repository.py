"""MongoDB implementation of `IUserRepository`."""

from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from pymongo import DESCENDING
from structlog import get_logger

from userauth.domain.dtos import CreateUserDTO
from userauth.domain.entities import User
from userauth.domain.entities.user import utc_now
from userauth.domain.interfaces import IUserRepository
from userauth.infrastructure.database import USERS_COLLECTION

from .base import MongoBaseRepository
from .mappers import to_bson_fields, user_from_document, user_to_document

logger = get_logger(__name__)

WITHOUT_PASSWORD = {"password": 0}


class MongoUserRepository(MongoBaseRepository[User], IUserRepository):
    """Stores users in the ``users`` collection.

    The password hash is projected out of every read except
    `find_by_email_with_password`, so entities handed to the rest of the
    application never carry it by accident.
    """

    @property
    def collection_name(self) -> str:
        return USERS_COLLECTION

    def to_document(self, entity: User) -> Dict[str, Any]:
        return user_to_document(entity)

    def from_document(self, doc: Dict[str, Any]) -> User:
        return user_from_document(doc)

    async def create(self, user_data: CreateUserDTO) -> User:
        now = utc_now()
        user = User(
            id=str(uuid4()),
            name=user_data.name,
            email=user_data.email,
            username=user_data.username,
            password=user_data.password,
            role=user_data.role,
            birth_date=user_data.birth_date,
            gender=user_data.gender,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )
        await self._insert_one(self.to_document(user))
        logger.info("User created", user_id=user.id)
        return user.model_copy(update={"password": None})

    async def find_by_id(self, user_id: str) -> Optional[User]:
        doc = await self._find_one({"_id": user_id}, WITHOUT_PASSWORD)
        return self.from_document(doc) if doc else None

    async def find_by_email(self, email: str) -> Optional[User]:
        doc = await self._find_one({"email": email}, WITHOUT_PASSWORD)
        return self.from_document(doc) if doc else None

    async def find_by_username(self, username: str) -> Optional[User]:
        doc = await self._find_one({"username": username}, WITHOUT_PASSWORD)
        return self.from_document(doc) if doc else None

    async def find_by_email_with_password(self, email: str) -> Optional[User]:
        doc = await self._find_one({"email": email})
        return user_from_document(doc, include_password=True) if doc else None

    async def find_all(self, page: int, limit: int) -> Tuple[List[User], int]:
        docs = await self._find_many(
            {},
            sort=[("created_at", DESCENDING)],
            skip=(page - 1) * limit,
            limit=limit,
            projection=WITHOUT_PASSWORD,
        )
        total = await self._count({})
        return [self.from_document(doc) for doc in docs], total

    async def update(self, user_id: str, data: Dict[str, Any]) -> Optional[User]:
        changes = to_bson_fields(data)
        changes["updated_at"] = utc_now()
        doc = await self._find_one_and_update({"_id": user_id}, {"$set": changes}, WITHOUT_PASSWORD)
        if doc is None:
            return None
        logger.info("User updated", user_id=user_id, fields=sorted(data))
        return self.from_document(doc)

    async def delete(self, user_id: str) -> bool:
        deleted = await self._delete_one({"_id": user_id})
        if deleted:
            logger.info("User deleted", user_id=user_id)
        return deleted > 0
