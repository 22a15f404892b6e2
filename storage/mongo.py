"""
MongoDB collection stores for async operations.
Handles connection, indexing, and keyed CRUD for records and accounts.
"""

from typing import Any, Dict, List, Optional

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from .base import CollectionStore

logger = structlog.get_logger(__name__)

# MongoDB's own identifier never leaves the store
_PROJECTION = {"_id": 0}


class MongoCollectionStore(CollectionStore):
    """Collection store backed by a single MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection, key_field: str):
        super().__init__(collection.name, key_field)
        self.collection = collection

    async def connect(self) -> None:
        """Create the unique index on the key field."""
        try:
            await self.collection.create_index(self.key_field, unique=True)
            logger.info("Created MongoDB index", collection=self.name, field=self.key_field)
        except Exception as e:
            logger.error("Failed to create index", collection=self.name, error=str(e))
            raise

    async def count(self) -> int:
        try:
            return await self.collection.count_documents({})
        except Exception as e:
            logger.error("Failed to count documents", collection=self.name, error=str(e))
            raise

    async def _find_all(self) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find({}, _PROJECTION)
            return await cursor.to_list(length=None)
        except Exception as e:
            logger.error("Failed to list documents", collection=self.name, error=str(e))
            raise

    async def _find_one(self, predicate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one(predicate, _PROJECTION)
        except Exception as e:
            logger.error("Failed to find document", collection=self.name, error=str(e))
            raise

    async def _insert(self, record: Dict[str, Any]) -> bool:
        try:
            await self.collection.insert_one(record)
            logger.debug("Successfully inserted document", collection=self.name, key=record[self.key_field])
            return True
        except DuplicateKeyError:
            logger.warning("Document already exists", collection=self.name, key=record[self.key_field])
            return False
        except Exception as e:
            logger.error("Failed to insert document", collection=self.name, error=str(e))
            raise

    async def _update(self, predicate: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        try:
            if not changes:
                # $set rejects an empty document
                return await self.collection.find_one(predicate, _PROJECTION) is not None
            result = await self.collection.update_one(predicate, {"$set": changes})
            # matched, not modified: writing identical values is still a success
            return result.matched_count > 0
        except Exception as e:
            logger.error("Failed to update document", collection=self.name, error=str(e))
            raise

    async def _delete(self, predicate: Dict[str, Any]) -> bool:
        try:
            result = await self.collection.delete_one(predicate)
            return result.deleted_count > 0
        except Exception as e:
            logger.error("Failed to delete document", collection=self.name, error=str(e))
            raise


class MongoDBManager:
    """
    Async MongoDB manager.
    Owns the client and hands out one store per collection.
    """

    def __init__(self, connection_url: str, database_name: str, timeout_ms: int = 5000):
        """
        Initialize MongoDB manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            timeout_ms: Server selection timeout in milliseconds
        """
        self.connection_url = connection_url
        self.database_name = database_name
        self.timeout_ms = timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        try:
            self.client = AsyncIOMotorClient(
                self.connection_url,
                serverSelectionTimeoutMS=self.timeout_ms,
            )
            self.database = self.client[self.database_name]

            # Test connection
            await self.client.admin.command("ping")
            logger.info("Successfully connected to MongoDB", database=self.database_name)

        except ConnectionFailure as e:
            logger.error("Failed to connect to MongoDB", error=str(e))
            raise

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("Disconnected from MongoDB")

    def get_store(self, collection_name: str, key_field: str) -> MongoCollectionStore:
        """
        Build a store over one collection of the connected database.

        Args:
            collection_name: Name of the collection
            key_field: Unique key of the records in that collection

        Returns:
            MongoCollectionStore instance
        """
        if self.database is None:
            raise RuntimeError("MongoDB manager is not connected")
        return MongoCollectionStore(self.database[collection_name], key_field)

    async def ping(self) -> bool:
        """Return True when the server answers a ping."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception as e:
            logger.error("Database ping failed", error=str(e))
            return False
