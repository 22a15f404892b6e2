"""
Unit tests for the MongoDB collection store.
The motor collection is replaced by mocks; no server is needed.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, Mock, patch

from pymongo.errors import ConnectionFailure, DuplicateKeyError

from storage.models import StoreStatus
from storage.mongo import MongoCollectionStore, MongoDBManager


@pytest.fixture
def mock_collection():
    """Mock motor collection."""
    collection = MagicMock()
    collection.name = "books"
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.update_one = AsyncMock(return_value=Mock(matched_count=1))
    collection.delete_one = AsyncMock(return_value=Mock(deleted_count=1))
    collection.count_documents = AsyncMock(return_value=0)
    collection.create_index = AsyncMock()
    return collection


@pytest.fixture
def store(mock_collection):
    return MongoCollectionStore(mock_collection, "id")


class TestMongoCollectionStore:
    """Test cases for MongoCollectionStore."""

    @pytest.mark.asyncio
    async def test_connect_creates_unique_index(self, store, mock_collection):
        await store.connect()

        mock_collection.create_index.assert_awaited_once_with("id", unique=True)

    @pytest.mark.asyncio
    async def test_find_all_hides_object_id(self, store, mock_collection):
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=[{"id": 1, "title": "t", "author": "a"}])
        mock_collection.find.return_value = cursor

        records = await store.find_all()

        assert records == [{"id": 1, "title": "t", "author": "a"}]
        mock_collection.find.assert_called_once_with({}, {"_id": 0})

    @pytest.mark.asyncio
    async def test_find_one_found(self, store, mock_collection):
        mock_collection.find_one.return_value = {"id": 1, "title": "t", "author": "a"}

        result = await store.find_one({"id": 1})

        assert result.ok
        assert result.value["title"] == "t"
        mock_collection.find_one.assert_awaited_once_with({"id": 1}, {"_id": 0})

    @pytest.mark.asyncio
    async def test_find_one_missing(self, store):
        result = await store.find_one({"id": 1})

        assert result.status == StoreStatus.NOT_FOUND

    @pytest.mark.asyncio
    async def test_insert_checks_for_existing_key(self, store, mock_collection):
        """An existing key is reported as a conflict without attempting the insert."""
        mock_collection.find_one.return_value = {"id": 1}

        result = await store.insert_one({"id": 1, "title": "t", "author": "a"})

        assert result.conflict
        mock_collection.insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insert_duplicate_key_error_is_conflict(self, store, mock_collection):
        """A unique-index violation from the server is a conflict too."""
        mock_collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        result = await store.insert_one({"id": 1, "title": "t", "author": "a"})

        assert result.conflict

    @pytest.mark.asyncio
    async def test_insert_success(self, store, mock_collection):
        result = await store.insert_one({"id": 65, "title": "t", "author": "a"})

        assert result.ok
        assert result.value == 65
        mock_collection.insert_one.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_update_uses_set_without_key(self, store, mock_collection):
        result = await store.update_one(1, {"id": 9, "title": "new", "author": "a"})

        assert result.ok
        mock_collection.update_one.assert_awaited_once_with(
            {"id": 1}, {"$set": {"title": "new", "author": "a"}}
        )

    @pytest.mark.asyncio
    async def test_update_unmatched_is_not_found(self, store, mock_collection):
        mock_collection.update_one.return_value = Mock(matched_count=0)

        result = await store.update_one(1, {"title": "new", "author": "a"})

        assert result.not_found

    @pytest.mark.asyncio
    async def test_update_with_identical_values_succeeds(self, store, mock_collection):
        """A matched but unmodified document still counts as updated."""
        mock_collection.update_one.return_value = Mock(matched_count=1, modified_count=0)

        result = await store.update_one(1, {"title": "same", "author": "a"})

        assert result.ok

    @pytest.mark.asyncio
    async def test_delete_unmatched_is_not_found(self, store, mock_collection):
        mock_collection.delete_one.return_value = Mock(deleted_count=0)

        result = await store.delete_one(1)

        assert result.not_found
        mock_collection.delete_one.assert_awaited_once_with({"id": 1})

    @pytest.mark.asyncio
    async def test_server_errors_propagate(self, store, mock_collection):
        mock_collection.find_one.side_effect = RuntimeError("server unavailable")

        with pytest.raises(RuntimeError):
            await store.find_one({"id": 1})


class TestMongoDBManager:
    """Test cases for MongoDBManager."""

    @pytest.mark.asyncio
    async def test_connect_pings_server(self):
        with patch("storage.mongo.AsyncIOMotorClient") as mock_client_cls:
            client = MagicMock()
            client.admin.command = AsyncMock(return_value={"ok": 1})
            mock_client_cls.return_value = client

            manager = MongoDBManager("mongodb://localhost:27017", "records_test", timeout_ms=100)
            await manager.connect()

            client.admin.command.assert_awaited_once_with("ping")
            mock_client_cls.assert_called_once_with("mongodb://localhost:27017", serverSelectionTimeoutMS=100)

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self):
        with patch("storage.mongo.AsyncIOMotorClient") as mock_client_cls:
            client = MagicMock()
            client.admin.command = AsyncMock(side_effect=ConnectionFailure("no server"))
            mock_client_cls.return_value = client

            manager = MongoDBManager("mongodb://localhost:27017", "records_test")
            with pytest.raises(ConnectionFailure):
                await manager.connect()

    def test_get_store_requires_connection(self):
        manager = MongoDBManager("mongodb://localhost:27017", "records_test")

        with pytest.raises(RuntimeError):
            manager.get_store("books", "id")

    @pytest.mark.asyncio
    async def test_ping_without_client(self):
        manager = MongoDBManager("mongodb://localhost:27017", "records_test")

        assert await manager.ping() is False
