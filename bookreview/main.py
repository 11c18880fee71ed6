"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory
   - create_app() receives its collaborators (settings, database handle,
     image storage) and builds a configured app
   - Tests build their own app around an in-memory database

2. Lifespan Events
   - startup: create missing tables, make sure the media directory exists
   - shutdown: dispose of the engine's connections

3. Exception Handlers
   - Every error is rendered as {"message": "..."}
   - Domain errors keep their status; validation errors become 400
   - Unexpected and database errors become 500 and are logged
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookreview import __version__
from bookreview.config import Settings, get_settings
from bookreview.database import Database
from bookreview.exceptions import BookReviewError, format_validation_errors
from bookreview.routers import (
    admin_router,
    auth_router,
    books_router,
    reviews_router,
)
from bookreview.services.images import LocalImageStorage
from bookreview.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield runs on startup, code after yield on shutdown.
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database
    image_storage: LocalImageStorage = app.state.image_storage

    # ----- STARTUP -----
    logger.info(f"Starting {app_settings.app_name}...")
    logger.info(f"Debug mode: {app_settings.debug}")
    logger.info(f"Database: {database!r}")

    database.create_tables()
    image_storage.ensure_root()

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {app_settings.app_name}...")
    database.dispose()


# =============================================================================
# Exception Handlers
# =============================================================================
def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """Install the handlers that give every error a {"message": ...} body."""

    @app.exception_handler(BookReviewError)
    async def book_review_error_handler(
        request: Request,
        exc: BookReviewError,
    ) -> JSONResponse:
        """Domain errors raised by services and the access policy."""
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Framework HTTP errors (unknown routes, wrong methods)."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed bodies and parameters are client errors: 400."""
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": format_validation_errors(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        The real error is logged; the client gets a generic message.
        """
        logger.error(f"Database error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "A database error occurred."},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        Internal details are only exposed in debug mode.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        message = str(exc) if app_settings.debug else "Internal Server Error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": message},
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    app_settings: Settings | None = None,
    database: Database | None = None,
    image_storage: LocalImageStorage | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to get_settings())
        database: Store handle (defaults to one built from the settings)
        image_storage: Cover image storage (defaults to local disk under
            settings.media_root)

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or get_settings()
    database = database or Database.from_settings(app_settings)
    image_storage = image_storage or LocalImageStorage.from_settings(app_settings)

    app = FastAPI(
        title=app_settings.app_name,
        description="""
## Book Review API

Browse books, review them (one review per book per user) and, as an
administrator, upload books and read catalog statistics.

### Authentication
`POST /api/login` returns a bearer token valid for 8 hours. Send it as
`Authorization: Bearer <token>`.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Collaborators live on app.state; dependencies read them from there
    app.state.settings = app_settings
    app.state.database = database
    app.state.image_storage = image_storage

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # The limiter is shared by every app; limit strings are bound when the
    # routers are imported, only the on/off switch follows app_settings
    limiter.enabled = app_settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    origins = app_settings.allowed_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, app_settings)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = "/api"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    app.include_router(admin_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Uploaded Images
    # -------------------------------------------------------------------------
    # check_dir=False: the directory is created during startup
    app.mount(
        image_storage.media_url,
        StaticFiles(directory=image_storage.media_root, check_dir=False),
        name="media",
    )

    # -------------------------------------------------------------------------
    # Liveness Endpoints
    # -------------------------------------------------------------------------
    @app.get(
        "/ping",
        tags=["Health"],
        summary="Ping",
        response_class=PlainTextResponse,
    )
    async def ping() -> str:
        """Plain-text liveness check used by the web client."""
        return "Pong 🏓"

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and the database answers.",
    )
    def health_check(request: Request) -> dict:
        """
        Health check endpoint.

        Used by load balancers and container probes.
        """
        db_handle: Database = request.app.state.database
        try:
            with db_handle.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            database_ok = True
        except SQLAlchemyError as exc:
            logger.warning(f"Health check database error: {exc}")
            database_ok = False

        return {
            "status": "healthy" if database_ok else "degraded",
            "app": app_settings.app_name,
            "version": __version__,
            "database": database_ok,
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookreview.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m bookreview.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookreview.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
