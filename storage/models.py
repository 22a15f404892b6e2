"""
Result types returned by the collection stores.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class StoreStatus(str, Enum):
    """Outcome of a collection store operation."""
    OK = "ok"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class StoreResult(BaseModel):
    """
    Explicit outcome of a store call.

    Stores never raise for a missing or duplicate key; callers match on
    ``status`` instead.
    """
    status: StoreStatus = Field(..., description="Operation outcome")
    value: Optional[Any] = Field(None, description="Record, key or None depending on the operation")

    @property
    def ok(self) -> bool:
        return self.status == StoreStatus.OK

    @property
    def not_found(self) -> bool:
        return self.status == StoreStatus.NOT_FOUND

    @property
    def conflict(self) -> bool:
        return self.status == StoreStatus.CONFLICT

    @classmethod
    def success(cls, value: Any = None) -> "StoreResult":
        return cls(status=StoreStatus.OK, value=value)

    @classmethod
    def missing(cls) -> "StoreResult":
        return cls(status=StoreStatus.NOT_FOUND)

    @classmethod
    def duplicate(cls, value: Any = None) -> "StoreResult":
        return cls(status=StoreStatus.CONFLICT, value=value)
