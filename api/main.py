"""
FastAPI main application for the Records API.
"""

import json
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import APIConfig, config as default_config
from api.credentials import CredentialService
from api.database import APIDatabaseService
from api.errors import APIError, BadRequest
from api.models import (
    AccountResponse, CreatedResponse, ErrorResponse,
    HealthResponse, MessageResponse
)
from api.resources import ResourceService

# Setup logging
logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, stack: Optional[str] = None) -> JSONResponse:
    """Render the error payload shared by every failure."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(status=status_code, message=message, stack=stack).model_dump(exclude_none=True),
    )


# Dependencies

def get_db_service(request: Request) -> APIDatabaseService:
    return request.app.state.db_service


def get_books(db_service: APIDatabaseService = Depends(get_db_service)) -> ResourceService:
    return db_service.books


def get_recipes(db_service: APIDatabaseService = Depends(get_db_service)) -> ResourceService:
    return db_service.recipes


def get_users(db_service: APIDatabaseService = Depends(get_db_service)) -> CredentialService:
    return db_service.users


async def read_json(request: Request) -> Any:
    """Raw JSON body; the services run the schema checks. An empty body is None."""
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        raise BadRequest()


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use; defaults to the environment-driven config
    """
    config = config or default_config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        # Startup
        logger.info("Starting Records API", backend=config.storage_backend)
        db_service = APIDatabaseService(config)
        await db_service.connect()
        app.state.db_service = db_service

        yield

        # Shutdown
        logger.info("Shutting down Records API")
        await db_service.close()

    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=config.api_version,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    # Exception handlers
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        """Handle errors raised by the services."""
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions, including unknown routes."""
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, BadRequest.default_message)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle general exceptions."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        stack = None
        if config.is_development():
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            APIError.default_message,
            stack=stack,
        )

    # Health check endpoint
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(db_service: APIDatabaseService = Depends(get_db_service)):
        """Health check endpoint."""
        health_info = await db_service.health_check()
        db_status = health_info.get("status", "unknown")
        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=config.api_version,
            database_status=db_status,
            collections=health_info.get("collections", {}),
        )

    # Books endpoints
    @app.get("/api/books", tags=["Books"])
    async def list_books(books: ResourceService = Depends(get_books)):
        """Get every book."""
        return await books.list()

    @app.get("/api/books/{book_id}", tags=["Books"])
    async def get_book(book_id: str, books: ResourceService = Depends(get_books)):
        """
        Get a single book by ID.

        - **book_id**: integer book identifier
        """
        return await books.get(book_id)

    @app.post("/api/books", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse, tags=["Books"])
    async def create_book(payload: Any = Depends(read_json), books: ResourceService = Depends(get_books)):
        """Create a book from exactly `{id, title, author}`."""
        return CreatedResponse(id=await books.create(payload))

    @app.put("/api/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Books"])
    async def update_book(
        book_id: str,
        payload: Any = Depends(read_json),
        books: ResourceService = Depends(get_books),
    ):
        """Replace a book's fields from exactly `{title, author}`."""
        await books.update(book_id, payload)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/api/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Books"])
    async def delete_book(book_id: str, books: ResourceService = Depends(get_books)):
        """Delete a book."""
        await books.delete(book_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Recipes endpoints
    @app.get("/api/recipes", tags=["Recipes"])
    async def list_recipes(recipes: ResourceService = Depends(get_recipes)):
        """Get every recipe."""
        return await recipes.list()

    @app.get("/api/recipes/{recipe_id}", tags=["Recipes"])
    async def get_recipe(recipe_id: str, recipes: ResourceService = Depends(get_recipes)):
        """
        Get a single recipe by ID.

        - **recipe_id**: integer recipe identifier
        """
        return await recipes.get(recipe_id)

    @app.post("/api/recipes", status_code=status.HTTP_201_CREATED, response_model=CreatedResponse, tags=["Recipes"])
    async def create_recipe(payload: Any = Depends(read_json), recipes: ResourceService = Depends(get_recipes)):
        """Create a recipe from exactly `{id, name, ingredients}`."""
        return CreatedResponse(id=await recipes.create(payload))

    @app.put("/api/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Recipes"])
    async def update_recipe(
        recipe_id: str,
        payload: Any = Depends(read_json),
        recipes: ResourceService = Depends(get_recipes),
    ):
        """Replace a recipe's fields from exactly `{name, ingredients}`."""
        await recipes.update(recipe_id, payload)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.delete("/api/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["Recipes"])
    async def delete_recipe(recipe_id: str, recipes: ResourceService = Depends(get_recipes)):
        """Delete a recipe."""
        await recipes.delete(recipe_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Account endpoints
    @app.post("/api/register", response_model=AccountResponse, tags=["Users"])
    async def register(payload: Any = Depends(read_json), users: CredentialService = Depends(get_users)):
        """Register an account from exactly `{email, password}`."""
        account = await users.register(payload)
        return AccountResponse(email=account["email"], message="Registration successful")

    @app.post("/api/login", response_model=MessageResponse, tags=["Users"])
    async def login(payload: Any = Depends(read_json), users: CredentialService = Depends(get_users)):
        """Check an email and password. No token or session is issued."""
        await users.login(payload)
        return MessageResponse(message="Authentication successful")

    @app.post("/api/users/{email}/verify-security-question", response_model=MessageResponse, tags=["Users"])
    async def verify_security_question(
        email: str,
        payload: Any = Depends(read_json),
        users: CredentialService = Depends(get_users),
    ):
        """Check the three security answers, in stored order."""
        await users.verify_security_questions(email, payload)
        return MessageResponse(message="Security questions successfully answered")

    @app.post("/api/users/{email}/reset-password", response_model=AccountResponse, tags=["Users"])
    async def reset_password(
        email: str,
        payload: Any = Depends(read_json),
        users: CredentialService = Depends(get_users),
    ):
        """Reset a password from exactly `{newPassword, securityQuestions}`."""
        account = await users.reset_password(email, payload)
        return AccountResponse(email=account["email"], message="Password reset successful")

    return app


# Create FastAPI application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=default_config.host,
        port=default_config.port,
        reload=default_config.debug,
        log_level=default_config.log_level.lower()
    )
