"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from api.auth import PASSWORD_MAX_BYTES
from api.validation import MAX_RECORD_ID, MIN_RECORD_ID


class RequestModel(BaseModel):
    """Base for inbound payloads: closed schema, strict primitive types."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# Books

class BookCreate(RequestModel):
    """Payload for creating a book. The id is supplied by the caller."""
    id: StrictInt = Field(..., ge=MIN_RECORD_ID, le=MAX_RECORD_ID, description="Unique book identifier")
    title: StrictStr = Field(..., description="Book title")
    author: StrictStr = Field(..., description="Book author")


class BookUpdate(RequestModel):
    """Payload for replacing a book's fields. The id is immutable."""
    title: StrictStr = Field(..., description="Book title")
    author: StrictStr = Field(..., description="Book author")


# Recipes

class RecipeCreate(RequestModel):
    """Payload for creating a recipe. The id is supplied by the caller."""
    id: StrictInt = Field(..., ge=MIN_RECORD_ID, le=MAX_RECORD_ID, description="Unique recipe identifier")
    name: StrictStr = Field(..., description="Recipe name")
    ingredients: List[StrictStr] = Field(..., description="Ingredient list")


class RecipeUpdate(RequestModel):
    """Payload for replacing a recipe's fields. The id is immutable."""
    name: StrictStr = Field(..., description="Recipe name")
    ingredients: List[StrictStr] = Field(..., description="Ingredient list")


# Users

def check_password_length(v: str) -> str:
    """Reject passwords bcrypt would silently truncate."""
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


class Credentials(RequestModel):
    """Payload for register and login."""
    email: StrictStr = Field(..., description="Account email, case-sensitive")
    password: StrictStr = Field(..., description="Plaintext password")

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password_length(v)


class SecurityAnswer(RequestModel):
    """One answer to a stored security question."""
    question: Optional[StrictStr] = Field(None, description="Question text, informational only")
    answer: StrictStr = Field(..., description="Answer compared against the stored one")


class SecurityQuestionCheck(RequestModel):
    """Payload for verifying the three security answers."""
    security_questions: List[SecurityAnswer] = Field(
        ..., alias="securityQuestions", min_length=3, max_length=3,
        description="Answers in the order the questions were stored",
    )


class PasswordReset(RequestModel):
    """Payload for resetting a password after answering the security questions."""
    new_password: StrictStr = Field(..., alias="newPassword", description="New plaintext password")
    security_questions: List[SecurityAnswer] = Field(
        ..., alias="securityQuestions", min_length=3, max_length=3,
        description="Answers in the order the questions were stored",
    )

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        return check_password_length(v)


# Responses

class CreatedResponse(BaseModel):
    """Response for a created record."""
    id: int = Field(..., description="Identifier of the new record")


class AccountResponse(BaseModel):
    """Non-sensitive view of an account."""
    email: str = Field(..., description="Account email")
    message: Optional[str] = Field(None, description="Outcome message")


class MessageResponse(BaseModel):
    """Plain outcome message."""
    message: str = Field(..., description="Outcome message")


class ErrorResponse(BaseModel):
    """Error response model."""
    type: str = Field("error", description="Always 'error'")
    status: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Error message")
    stack: Optional[str] = Field(None, description="Stack trace, development only")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Storage connection status")
    collections: Dict[str, int] = Field(default_factory=dict, description="Record count per collection")
