"""
CRUD service shared by the books and recipes collections.
"""

from typing import Any, Dict, List, Type

import structlog
from pydantic import BaseModel

from api.errors import Conflict, NotFound
from api.models import BookCreate, BookUpdate, RecipeCreate, RecipeUpdate
from api.validation import coerce_id, id_in_range, parse_payload
from storage.base import CollectionStore

logger = structlog.get_logger(__name__)


class ResourceService:
    """
    CRUD over one collection of integer-keyed records.

    Identifiers arrive as path text and are coerced before the store is
    consulted. Store misses become ``NotFound("<Resource> not found")`` and
    duplicate ids become ``Conflict``.
    """

    def __init__(
        self,
        store: CollectionStore,
        resource_name: str,
        create_model: Type[BaseModel],
        update_model: Type[BaseModel],
    ):
        """
        Args:
            store: Collection store keyed on ``id``
            resource_name: Singular display name, e.g. "Book"
            create_model: Schema of a create payload (id plus domain fields)
            update_model: Schema of an update payload (domain fields only)
        """
        self.store = store
        self.resource_name = resource_name
        self.create_model = create_model
        self.update_model = update_model

    def _not_found(self) -> NotFound:
        return NotFound(f"{self.resource_name} not found")

    def _require_storable(self, record_id: int) -> None:
        # no stored record can carry an id outside the 64-bit range
        if not id_in_range(record_id):
            raise self._not_found()

    async def list(self) -> List[Dict[str, Any]]:
        """Return the whole collection verbatim."""
        return await self.store.find_all()

    async def get(self, raw_id: str) -> Dict[str, Any]:
        """
        Get one record.

        Raises:
            BadRequest: non-numeric identifier
            NotFound: no record with that id
        """
        record_id = coerce_id(raw_id)
        self._require_storable(record_id)
        result = await self.store.find_one({"id": record_id})
        if result.not_found:
            raise self._not_found()
        return result.value

    async def create(self, payload: Any) -> int:
        """
        Insert a new record with a caller-supplied id.

        Returns:
            The new record's id

        Raises:
            BadRequest: payload is not exactly ``{id, <domain fields>}``
            Conflict: the id is already taken
        """
        record = parse_payload(payload, self.create_model).model_dump()
        result = await self.store.insert_one(record)
        if result.conflict:
            raise Conflict(f"{self.resource_name} with id {record['id']} already exists")

        logger.info("Record created", resource=self.resource_name, id=record["id"])
        return record["id"]

    async def update(self, raw_id: str, payload: Any) -> None:
        """
        Replace a record's domain fields. The id itself is immutable.

        Raises:
            BadRequest: non-numeric identifier, or payload is not exactly the domain fields
            NotFound: no record with that id
        """
        record_id = coerce_id(raw_id)
        fields = parse_payload(payload, self.update_model).model_dump()
        self._require_storable(record_id)
        result = await self.store.update_one(record_id, fields)
        if result.not_found:
            raise self._not_found()

        logger.info("Record updated", resource=self.resource_name, id=record_id)

    async def delete(self, raw_id: str) -> None:
        """
        Delete a record.

        Raises:
            BadRequest: non-numeric identifier
            NotFound: no record with that id
        """
        record_id = coerce_id(raw_id)
        self._require_storable(record_id)
        result = await self.store.delete_one(record_id)
        if result.not_found:
            raise self._not_found()

        logger.info("Record deleted", resource=self.resource_name, id=record_id)


def book_service(store: CollectionStore) -> ResourceService:
    return ResourceService(store, "Book", BookCreate, BookUpdate)


def recipe_service(store: CollectionStore) -> ResourceService:
    return ResourceService(store, "Recipe", RecipeCreate, RecipeUpdate)
