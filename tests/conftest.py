"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from api.auth import PasswordHasher
from api.config import APIConfig
from api.main import create_app
from storage.base import CollectionStore
from storage.memory import MemoryCollectionStore
from storage.seed import SEED_BOOKS, SEED_RECIPES, build_seed_users


@pytest.fixture
def test_config():
    """Memory-backed configuration with sample data and a cheap bcrypt work factor."""
    return APIConfig(
        _env_file=None,
        storage_backend="memory",
        seed_data=True,
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture
def client(test_config):
    """Test client running the full application lifespan."""
    app = create_app(test_config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def hasher():
    """Password hasher with the minimum work factor."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def books_store():
    """Empty books store."""
    return MemoryCollectionStore("books", "id")


@pytest.fixture
def recipes_store():
    """Empty recipes store."""
    return MemoryCollectionStore("recipes", "id")


@pytest.fixture
def users_store():
    """Empty users store."""
    return MemoryCollectionStore("users", "email")


@pytest.fixture
def mock_store():
    """Store double that records every call."""
    store = AsyncMock(spec=CollectionStore)
    store.name = "mock"
    store.key_field = "id"
    return store


@pytest.fixture
def sample_books():
    return [dict(book) for book in SEED_BOOKS]


@pytest.fixture
def sample_recipes():
    return [dict(recipe) for recipe in SEED_RECIPES]


@pytest.fixture
def sample_users(hasher):
    return build_seed_users(hasher.hash)


@pytest.fixture
def ron_answers():
    """Ron's security answers in stored order."""
    return [
        {"answer": "Scabbers"},
        {"answer": "Quidditch Through the Ages"},
        {"answer": "Prewett"},
    ]
