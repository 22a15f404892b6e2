"""
Error taxonomy raised by the services and rendered by the API boundary.
"""

from typing import Optional

from fastapi import status


class APIError(Exception):
    """Base class for failures surfaced to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(APIError):
    """Malformed payload or identifier. Detected before the store is touched."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class Unauthorized(APIError):
    """Credential or security answer mismatch, or unknown account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class NotFound(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"


class Conflict(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
