"""
In-process collection store.

Used for local development and the test-suite. Records are kept in
insertion order and handed out as deep copies so callers never hold a
reference into the store.
"""

import copy
from typing import Any, Dict, List, Optional

import structlog

from .base import CollectionStore

logger = structlog.get_logger(__name__)


class MemoryCollectionStore(CollectionStore):
    """List-backed collection store."""

    def __init__(self, name: str, key_field: str):
        super().__init__(name, key_field)
        self._records: List[Dict[str, Any]] = []

    async def connect(self) -> None:
        logger.info("Memory collection opened", collection=self.name)

    async def close(self) -> None:
        self._records.clear()
        logger.info("Memory collection closed", collection=self.name)

    async def count(self) -> int:
        return len(self._records)

    def _match(self, predicate: Dict[str, Any]) -> Optional[int]:
        for index, record in enumerate(self._records):
            if all(name in record and record[name] == value for name, value in predicate.items()):
                return index
        return None

    async def _find_all(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._records)

    async def _find_one(self, predicate: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        index = self._match(predicate)
        if index is None:
            return None
        return copy.deepcopy(self._records[index])

    async def _insert(self, record: Dict[str, Any]) -> bool:
        self._records.append(copy.deepcopy(record))
        logger.debug("Record inserted", collection=self.name, key=record[self.key_field])
        return True

    async def _update(self, predicate: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        index = self._match(predicate)
        if index is None:
            return False
        self._records[index].update(copy.deepcopy(changes))
        return True

    async def _delete(self, predicate: Dict[str, Any]) -> bool:
        index = self._match(predicate)
        if index is None:
            return False
        del self._records[index]
        return True
