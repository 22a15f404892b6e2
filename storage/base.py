"""
Abstract keyed collection used behind every resource.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .models import StoreResult

logger = structlog.get_logger(__name__)


class CollectionStore(ABC):
    """
    Keyed collection of plain-dict records.

    Each store has a single unique ``key_field`` (``id`` for records,
    ``email`` for accounts). Mutations are serialised through a
    per-collection lock so concurrent inserts of the same key, or an
    update racing a delete, cannot interleave.
    """

    def __init__(self, name: str, key_field: str):
        """
        Initialize the store.

        Args:
            name: Collection name, used in logs
            key_field: Field holding the unique, immutable record key
        """
        self.name = name
        self.key_field = key_field
        self._write_lock = asyncio.Lock()

    async def find_all(self) -> List[Dict[str, Any]]:
        """Return every record in store order. Never fails on an empty store."""
        return await self._find_all()

    async def find_one(self, predicate: Dict[str, Any]) -> StoreResult:
        """
        Find the first record matching all fields of ``predicate``.

        Args:
            predicate: Field/value equality pairs

        Returns:
            StoreResult with the record, or NOT_FOUND
        """
        record = await self._find_one(predicate)
        if record is None:
            return StoreResult.missing()
        return StoreResult.success(record)

    async def insert_one(self, record: Dict[str, Any]) -> StoreResult:
        """
        Insert a record if its key is not taken yet.

        Args:
            record: Record containing ``key_field``

        Returns:
            StoreResult with the inserted key, or CONFLICT
        """
        key = record[self.key_field]
        async with self._write_lock:
            if await self._find_one({self.key_field: key}) is not None:
                logger.warning("Duplicate key rejected", collection=self.name, key=key)
                return StoreResult.duplicate(key)
            inserted = await self._insert(dict(record))
        if not inserted:
            return StoreResult.duplicate(key)
        return StoreResult.success(key)

    async def update_one(self, key: Any, fields: Dict[str, Any]) -> StoreResult:
        """
        Replace the given fields on the record identified by ``key``.

        The key field itself is never written.

        Args:
            key: Value of ``key_field``
            fields: Fields to set

        Returns:
            StoreResult OK, or NOT_FOUND
        """
        changes = {name: value for name, value in fields.items() if name != self.key_field}
        async with self._write_lock:
            matched = await self._update({self.key_field: key}, changes)
        if not matched:
            return StoreResult.missing()
        return StoreResult.success(key)

    async def delete_one(self, key: Any) -> StoreResult:
        """
        Delete the record identified by ``key``.

        Returns:
            StoreResult OK, or NOT_FOUND
        """
        async with self._write_lock:
            deleted = await self._delete({self.key_field: key})
        if not deleted:
            return StoreResult.missing()
        return StoreResult.success(key)

    async def seed(self, records: Iterable[Dict[str, Any]]) -> int:
        """
        Insert records whose key is not present yet.

        Returns:
            Number of records inserted
        """
        inserted = 0
        for record in records:
            result = await self.insert_one(record)
            if result.ok:
                inserted += 1
        logger.info("Collection seeded", collection=self.name, inserted=inserted)
        return inserted

    async def connect(self) -> None:
        """Open the backing collection."""

    async def close(self) -> None:
        """Release the backing collection."""

    @abstractmethod
    async def count(self) -> int:
        """Number of records in the collection."""

    @abstractmethod
    async def _find_all(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def _find_one(self, predicate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def _insert(self, record: Dict[str, Any]) -> bool:
        """Insert without checks. Returns False on a back end duplicate-key error."""

    @abstractmethod
    async def _update(self, predicate: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        """Apply ``changes`` to the first match. Returns whether a record matched."""

    @abstractmethod
    async def _delete(self, predicate: Dict[str, Any]) -> bool:
        """Delete the first match. Returns whether a record was deleted."""
