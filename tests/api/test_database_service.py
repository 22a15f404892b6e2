"""
Tests for the storage lifecycle service.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from api.database import APIDatabaseService
from storage.memory import MemoryCollectionStore


class TestAPIDatabaseService:
    """Test cases for APIDatabaseService."""

    @pytest.mark.asyncio
    async def test_memory_backend_with_seed(self, test_config):
        db_service = APIDatabaseService(test_config)
        await db_service.connect()

        assert isinstance(db_service.stores["books"], MemoryCollectionStore)
        assert db_service.stores["users"].key_field == "email"
        health = await db_service.health_check()
        assert health == {"status": "healthy", "collections": {"books": 5, "recipes": 3, "users": 3}}

        await db_service.close()

    @pytest.mark.asyncio
    async def test_memory_backend_without_seed(self, test_config):
        db_service = APIDatabaseService(test_config.model_copy(update={"seed_data": False}))
        await db_service.connect()

        assert await db_service.books.list() == []

        await db_service.close()

    @pytest.mark.asyncio
    async def test_seed_hashes_passwords(self, test_config):
        db_service = APIDatabaseService(test_config.model_copy(update={"seed_data": False}))
        await db_service.connect()

        counts = await db_service.seed()

        assert counts == {"books": 5, "recipes": 3, "users": 3}
        ron = (await db_service.stores["users"].find_one({"email": "ron@hogwarts.edu"})).value
        assert ron["password"] != "weasley"
        assert db_service.hasher.verify("weasley", ron["password"])
        assert len(ron["securityQuestions"]) == 3

        await db_service.close()

    @pytest.mark.asyncio
    async def test_mongodb_backend(self, test_config):
        config = test_config.model_copy(update={"storage_backend": "mongodb", "seed_data": False})

        with patch("api.database.MongoDBManager") as mock_manager_cls:
            manager = MagicMock()
            manager.connect = AsyncMock()
            manager.disconnect = AsyncMock()
            manager.ping = AsyncMock(return_value=True)
            manager.get_store.side_effect = lambda name, key: MemoryCollectionStore(name, key)
            mock_manager_cls.return_value = manager

            db_service = APIDatabaseService(config)
            await db_service.connect()

            manager.connect.assert_awaited_once()
            assert [call.args for call in manager.get_store.call_args_list] == [
                ("books", "id"), ("recipes", "id"), ("users", "email")
            ]
            assert (await db_service.health_check())["status"] == "healthy"

            manager.ping.return_value = False
            assert (await db_service.health_check())["status"] == "unhealthy"

            await db_service.close()
            manager.disconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self, test_config):
        config = test_config.model_copy(update={"storage_backend": "mongodb"})

        with patch("api.database.MongoDBManager") as mock_manager_cls:
            manager = MagicMock()
            manager.connect = AsyncMock(side_effect=ConnectionError("no server"))
            mock_manager_cls.return_value = manager

            with pytest.raises(ConnectionError):
                await APIDatabaseService(config).connect()
