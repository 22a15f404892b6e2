"""
Payload and identifier guards.

Every write goes through ``parse_payload``: the payload's field names must
equal the model's field set exactly (no missing, no extra) before the
typed model is even built. Partial updates are rejected; all writes
behave like full-record PUT/POST.
"""

import re
from typing import Any, Iterable, Set, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from api.errors import BadRequest

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_INTEGER = re.compile(r"^-?\d+$")

# Signed 64-bit range, the widest integer a BSON document can hold
MIN_RECORD_ID = -(2 ** 63)
MAX_RECORD_ID = 2 ** 63 - 1


def expected_fields(model: Type[BaseModel]) -> Set[str]:
    """Wire names of a model's fields (aliases where declared)."""
    return {field.alias or name for name, field in model.model_fields.items()}


def has_exact_fields(payload: Any, expected: Iterable[str]) -> bool:
    """
    Check that ``payload`` is a mapping whose keys are exactly ``expected``.

    Order is irrelevant; missing or extra keys both fail.
    """
    if not isinstance(payload, dict):
        return False
    return set(payload) == set(expected)


def require_exact_fields(payload: Any, expected: Iterable[str]) -> dict:
    """Return ``payload`` unchanged or raise BadRequest on a field-set mismatch."""
    expected = set(expected)
    if not has_exact_fields(payload, expected):
        received = sorted(payload) if isinstance(payload, dict) else type(payload).__name__
        logger.info("Payload rejected", expected=sorted(expected), received=received)
        raise BadRequest()
    return payload


def parse_payload(payload: Any, model: Type[ModelT]) -> ModelT:
    """
    Validate ``payload`` against ``model``.

    The field-set check runs first; the model then enforces primitive
    types and nested structure.

    Raises:
        BadRequest: on any field-set or type mismatch
    """
    require_exact_fields(payload, expected_fields(model))
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.info("Payload failed type validation", model=model.__name__, errors=e.error_count())
        raise BadRequest()


def coerce_id(value: str) -> int:
    """
    Convert a path identifier to an integer.

    Raises:
        BadRequest: "Input must be a number" when the text is not an integer
    """
    text = value.strip() if isinstance(value, str) else ""
    if not _INTEGER.match(text):
        raise BadRequest("Input must be a number")
    try:
        return int(text)
    except ValueError:
        # past the interpreter's integer string conversion limit
        raise BadRequest("Input must be a number")


def id_in_range(record_id: int) -> bool:
    """Whether ``record_id`` fits the storable integer range."""
    return MIN_RECORD_ID <= record_id <= MAX_RECORD_ID
