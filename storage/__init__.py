"""
Keyed collection stores behind the books, recipes and users resources.

This package contains:
- The abstract collection store and its explicit result type
- A MongoDB back end (motor)
- An in-process back end for development and tests
- Sample seed data
"""

from .base import CollectionStore
from .memory import MemoryCollectionStore
from .models import StoreResult, StoreStatus
from .mongo import MongoCollectionStore, MongoDBManager

__all__ = [
    "CollectionStore",
    "MemoryCollectionStore",
    "MongoCollectionStore",
    "MongoDBManager",
    "StoreResult",
    "StoreStatus",
]
