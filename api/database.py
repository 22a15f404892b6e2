"""
Storage lifecycle for the FastAPI application.

Opens the books, recipes and users stores at startup, builds the services
on top of them and closes everything at shutdown.
"""

from typing import Dict, Optional

import structlog

from api.auth import PasswordHasher
from api.config import APIConfig
from api.credentials import CredentialService
from api.resources import ResourceService, book_service, recipe_service
from storage.base import CollectionStore
from storage.memory import MemoryCollectionStore
from storage.mongo import MongoDBManager
from storage.seed import SEED_BOOKS, SEED_RECIPES, build_seed_users

logger = structlog.get_logger(__name__)


class APIDatabaseService:
    """Owns the collection stores and the services built on them."""

    def __init__(self, config: APIConfig):
        self.config = config
        self.hasher = PasswordHasher(rounds=config.bcrypt_rounds)
        self.manager: Optional[MongoDBManager] = None
        self.stores: Dict[str, CollectionStore] = {}
        self.books: Optional[ResourceService] = None
        self.recipes: Optional[ResourceService] = None
        self.users: Optional[CredentialService] = None

    async def connect(self) -> None:
        """Open the stores for the configured backend and build the services."""
        try:
            if self.config.storage_backend == "mongodb":
                self.manager = MongoDBManager(
                    connection_url=self.config.mongodb_url,
                    database_name=self.config.mongodb_database,
                    timeout_ms=self.config.mongodb_timeout_ms,
                )
                await self.manager.connect()
                self.stores = {
                    "books": self.manager.get_store(self.config.books_collection, "id"),
                    "recipes": self.manager.get_store(self.config.recipes_collection, "id"),
                    "users": self.manager.get_store(self.config.users_collection, "email"),
                }
            else:
                self.stores = {
                    "books": MemoryCollectionStore(self.config.books_collection, "id"),
                    "recipes": MemoryCollectionStore(self.config.recipes_collection, "id"),
                    "users": MemoryCollectionStore(self.config.users_collection, "email"),
                }

            for store in self.stores.values():
                await store.connect()

        except Exception as e:
            logger.error("Failed to open storage", backend=self.config.storage_backend, error=str(e))
            raise

        self.books = book_service(self.stores["books"])
        self.recipes = recipe_service(self.stores["recipes"])
        self.users = CredentialService(self.stores["users"], self.hasher)

        logger.info("Storage opened", backend=self.config.storage_backend)

        if self.config.seed_data:
            await self.seed()

    async def seed(self) -> Dict[str, int]:
        """Load the sample books, recipes and accounts where their keys are free."""
        counts = {
            "books": await self.stores["books"].seed(SEED_BOOKS),
            "recipes": await self.stores["recipes"].seed(SEED_RECIPES),
            "users": await self.stores["users"].seed(build_seed_users(self.hasher.hash)),
        }
        logger.info("Sample data loaded", **counts)
        return counts

    async def close(self) -> None:
        """Close every store and the database client."""
        for store in self.stores.values():
            await store.close()
        if self.manager:
            await self.manager.disconnect()
        logger.info("Storage closed", backend=self.config.storage_backend)

    async def health_check(self) -> Dict:
        """
        Perform storage health check.

        Returns:
            Dictionary with health status and per-collection counts
        """
        try:
            if self.manager and not await self.manager.ping():
                return {"status": "unhealthy", "collections": {}}

            counts = {name: await store.count() for name, store in self.stores.items()}
            return {
                "status": "healthy",
                "collections": counts,
            }
        except Exception as e:
            logger.error("Storage health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e),
                "collections": {},
            }
