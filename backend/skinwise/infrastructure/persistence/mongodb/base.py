"""Base MongoDB repository with reusable patterns.

Provides common functionality for MongoDB repositories:
- Connection management
- Document mapping (domain <-> MongoDB)
- Error handling (PyMongoError -> DatabaseError)
- Logging
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from skinwise.domain.shared.errors import DatabaseError

TEntity = TypeVar("TEntity")

logger = logging.getLogger(__name__)


class MongoBaseRepository(ABC, Generic[TEntity]):
    """
    Abstract base class for MongoDB repositories.

    Subclasses must implement:
    - collection_name: Name of MongoDB collection
    - to_document(): Convert domain entity to MongoDB document
    - from_document(): Convert MongoDB document to domain entity
    """

    def __init__(
        self,
        database: Optional[AsyncIOMotorDatabase] = None,
        uri: Optional[str] = None,
        database_name: str = "skinwise",
    ):
        """
        Initialize repository.

        Args:
            database: Motor database (if None, a client is opened on ``uri``)
            uri: MongoDB connection string, used when no database is given
            database_name: Database selected on the opened client
        """
        self._client: Optional[AsyncIOMotorClient] = None
        if database is None:
            if not uri:
                raise ValueError(
                    "MongoDB repository needs a database or a connection uri "
                    "(set MONGODB_URI)"
                )
            self._client = AsyncIOMotorClient(uri)
            database = self._client[database_name]

        self._db = database
        self._collection = self._db[self.collection_name]

        logger.info(
            f"Initialized {self.__class__.__name__} for collection '{self.collection_name}'"
        )

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """MongoDB collection name."""
        pass

    @abstractmethod
    def to_document(self, entity: TEntity) -> Dict[str, Any]:
        """Convert domain entity to MongoDB document."""
        pass

    @abstractmethod
    def from_document(self, doc: Dict[str, Any]) -> TEntity:
        """
        Convert MongoDB document to domain entity.

        Raises:
            DatabaseError: If document is invalid or missing required fields
        """
        pass

    async def _find_one(self, filter_dict: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return await self._collection.find_one(filter_dict)
        except PyMongoError as e:
            logger.error(
                f"Error in find_one: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise DatabaseError(f"find_one failed on {self.collection_name}: {e}") from e

    async def _find_one_and_update(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
    ) -> Optional[Dict[str, Any]]:
        """
        Atomic conditional update returning the document after the write.

        Returns:
            Updated document, or None when nothing matched the filter
        """
        try:
            return await self._collection.find_one_and_update(
                filter_dict,
                update_dict,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(
                f"Error in find_one_and_update: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise DatabaseError(
                f"find_one_and_update failed on {self.collection_name}: {e}"
            ) from e

    async def _update_one(
        self,
        filter_dict: Dict[str, Any],
        update_dict: Dict[str, Any],
        upsert: bool = False,
    ) -> int:
        """
        Update single document.

        Returns:
            Number of documents modified (0 or 1)
        """
        try:
            result = await self._collection.update_one(filter_dict, update_dict, upsert=upsert)
            return result.modified_count
        except PyMongoError as e:
            logger.error(
                f"Error in update_one: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise DatabaseError(f"update_one failed on {self.collection_name}: {e}") from e

    async def _delete_one(self, filter_dict: Dict[str, Any]) -> int:
        try:
            result = await self._collection.delete_one(filter_dict)
            return result.deleted_count
        except PyMongoError as e:
            logger.error(
                f"Error in delete_one: collection={self.collection_name}, "
                f"filter={filter_dict}, error={e}"
            )
            raise DatabaseError(f"delete_one failed on {self.collection_name}: {e}") from e

    async def close(self) -> None:
        """Close the MongoDB connection if this repository opened it."""
        if self._client is not None:
            self._client.close()
            logger.info(f"Closed connection for {self.__class__.__name__}")
