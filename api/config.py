"""
API configuration settings.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Records API"
    api_version: str = "1.0.0"
    api_description: str = (
        "REST API over two record collections and a user-account store. "
        "Books and recipes are keyed by a caller-supplied integer id; accounts support "
        "register, login, security-question verification and password reset. "
        "Writes must carry exactly the expected fields. Errors are returned as "
        "`{\"type\": \"error\", \"status\": <code>, \"message\": <text>}`."
    )

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    environment: str = "development"

    # Storage Settings
    storage_backend: str = "mongodb"
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_database: str = "records_api"
    mongodb_timeout_ms: int = 5000
    books_collection: str = "books"
    recipes_collection: str = "recipes"
    users_collection: str = "users"
    seed_data: bool = False

    # Security Settings
    bcrypt_rounds: int = 10

    # CORS Settings
    cors_origins: list = ["*"]  # Configure appropriately for production
    cors_allow_credentials: bool = True
    cors_allow_methods: list = ["*"]
    cors_allow_headers: list = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v):
        """Ensure the storage backend is known."""
        valid_backends = ["mongodb", "memory"]
        if v.lower() not in valid_backends:
            raise ValueError(f"storage_backend must be one of: {valid_backends}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure the environment name is known."""
        valid_environments = ["development", "production", "test"]
        if v.lower() not in valid_environments:
            raise ValueError(f"environment must be one of: {valid_environments}")
        return v.lower()

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v):
        """bcrypt accepts log2 work factors between 4 and 31."""
        if v < 4 or v > 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {valid_formats}")
        return v.lower()

    def is_development(self) -> bool:
        """Check if stack traces may be exposed in error responses."""
        return self.environment == "development"


# Global config instance
config = APIConfig()
