"""Base MongoDB repository with reusable patterns.

Provides common functionality for the MongoDB repositories:
- Collection handle resolution
- Document mapping (domain <-> MongoDB)
- Error handling: driver errors are logged and re-raised as `DatabaseError`;
  unique index violations become `ConflictError`

Concrete repositories inherit from MongoBaseRepository and implement
``collection_name``, ``to_document`` and ``from_document``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError
from structlog import get_logger

from userauth.core.exceptions import ConflictError, DatabaseError

TEntity = TypeVar("TEntity")

logger = get_logger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    Example:
        class MongoUserRepository(MongoBaseRepository[User]):
            @property
            def collection_name(self) -> str:
                return "users"
    """

    def __init__(self, database: AsyncIOMotorDatabase):
        self._db = database
        self._collection: AsyncIOMotorCollection = database[self.collection_name]

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """Convert MongoDB document to domain entity."""

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    def _fail(self, operation: str, error: PyMongoError, **context: Any) -> DatabaseError:
        logger.error(
            "Database operation failed",
            collection=self.collection_name,
            operation=operation,
            error=str(error),
            **context,
        )
        return DatabaseError(
            f"Database error during {operation} on {self.collection_name}",
            code="database_error",
        )

    def _conflict(self, operation: str, error: DuplicateKeyError) -> ConflictError:
        key_pattern = (error.details or {}).get("keyPattern") or {}
        field = next(iter(key_pattern), None)
        logger.warning(
            "Unique index violation",
            collection=self.collection_name,
            operation=operation,
            field=field,
        )
        return ConflictError(
            f"Duplicate value for {field or 'a unique field'} in {self.collection_name}",
            code=f"{field}_taken" if field else "conflict",
            field=field,
        )

    async def _find_one(
        self,
        filter_dict: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection.find_one(filter_dict, projection)
        except PyMongoError as e:
            raise self._fail("find_one", e, filter=list(filter_dict)) from e

    async def _find_many(
        self,
        filter_dict: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents.

        Args:
            filter_dict: MongoDB filter
            sort: Sort specification [(field, direction), ...]
            limit: Max documents to return
            skip: Documents to skip
            projection: Optional projection
        """
        try:
            cursor = self._collection.find(filter_dict, projection)

            if sort:
                cursor = cursor.sort(sort)
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)

            return await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise self._fail("find_many", e, filter=list(filter_dict)) from e

    async def _insert_one(self, document: Dict[str, Any]) -> None:
        try:
            await self._collection.insert_one(document)
        except DuplicateKeyError as e:
            raise self._conflict("insert_one", e) from e
        except PyMongoError as e:
            raise self._fail("insert_one", e) from e

    async def _find_one_and_update(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Apply ``update_dict`` and return the document after the update."""
        try:
            return await self._collection.find_one_and_update(
                filter_dict,
                update_dict,
                projection=projection,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise self._conflict("find_one_and_update", e) from e
        except PyMongoError as e:
            raise self._fail("find_one_and_update", e, filter=list(filter_dict)) from e

    async def _delete_one(self, filter_dict: Dict[str, Any]) -> int:
        try:
            result = await self._collection.delete_one(filter_dict)
            return result.deleted_count
        except PyMongoError as e:
            raise self._fail("delete_one", e, filter=list(filter_dict)) from e

    async def _delete_many(self, filter_dict: Dict[str, Any]) -> int:
        try:
            result = await self._collection.delete_many(filter_dict)
            return result.deleted_count
        except PyMongoError as e:
            raise self._fail("delete_many", e) from e

    async def _count(self, filter_dict: Dict[str, Any]) -> int:
        try:
            return await self._collection.count_documents(filter_dict)
        except PyMongoError as e:
            raise self._fail("count", e) from e
