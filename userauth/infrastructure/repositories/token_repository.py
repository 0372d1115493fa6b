"""MongoDB implementation of `ITokenRepository`."""

from typing import Any, Dict, List, Optional
from uuid import uuid4

from pymongo import DESCENDING
from structlog import get_logger

from userauth.domain.dtos import CreateTokenDTO, UpdateTokenDTO
from userauth.domain.entities import Token
from userauth.domain.entities.user import utc_now
from userauth.domain.interfaces import ITokenRepository
from userauth.infrastructure.database import TOKENS_COLLECTION

from .base import MongoBaseRepository
from .mappers import to_bson_fields, token_from_document, token_to_document

logger = get_logger(__name__)


class MongoTokenRepository(MongoBaseRepository[Token], ITokenRepository):
    """Stores verification and password reset tokens in ``tokens``."""

    @property
    def collection_name(self) -> str:
        return TOKENS_COLLECTION

    def to_document(self, entity: Token) -> Dict[str, Any]:
        return token_to_document(entity)

    def from_document(self, doc: Dict[str, Any]) -> Token:
        return token_from_document(doc)

    async def create(self, token_data: CreateTokenDTO) -> Token:
        now = utc_now()
        token = Token(
            id=str(uuid4()),
            user_id=token_data.user_id,
            token=token_data.token,
            type=token_data.type,
            expires_at=token_data.expires_at,
            is_revoked=token_data.is_revoked,
            created_at=now,
            updated_at=now,
        )
        await self._insert_one(self.to_document(token))
        logger.debug("Token created", token_id=token.id, user_id=token.user_id, type=token.type.value)
        return token

    async def find_by_id(self, token_id: str) -> Optional[Token]:
        doc = await self._find_one({"_id": token_id})
        return self.from_document(doc) if doc else None

    async def find_by_user_id(self, user_id: str) -> List[Token]:
        docs = await self._find_many(
            {"user_id": user_id, "is_revoked": False, "expires_at": {"$gt": utc_now()}},
            sort=[("created_at", DESCENDING)],
        )
        return [self.from_document(doc) for doc in docs]

    async def find_by_token(self, token: str) -> Optional[Token]:
        doc = await self._find_one({"token": token})
        return self.from_document(doc) if doc else None

    async def update(self, token_id: str, token_data: UpdateTokenDTO) -> Optional[Token]:
        changes = to_bson_fields(token_data.model_dump(exclude_none=True))
        changes["updated_at"] = utc_now()
        doc = await self._find_one_and_update({"_id": token_id}, {"$set": changes})
        return self.from_document(doc) if doc else None

    async def revoke(self, token_id: str) -> Optional[Token]:
        return await self.update(token_id, UpdateTokenDTO(is_revoked=True))

    async def delete(self, token_id: str) -> bool:
        return await self._delete_one({"_id": token_id}) > 0

    async def remove_expired(self) -> int:
        removed = await self._delete_many(
            {"$or": [{"expires_at": {"$lte": utc_now()}}, {"is_revoked": True}]}
        )
        logger.info("Expired tokens removed", count=removed)
        return removed
