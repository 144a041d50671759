"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from pathlib import Path
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from app.config import settings
from app.database import check_database_connection, close_db_connection, create_tables
from app.routers import (
    auth_router,
    listings_router,
    favorites_router,
    inquiries_router,
    admin_router,
    upload_router
)
from app.schemas.envelope import success_response, error_response
from app.utils.exceptions import APIException
from app.services.error_handler import ErrorHandlerService
from app.middleware.request_logging import RequestLoggingMiddleware


def configure_logging() -> None:
    """Console logging at the configured level, plus the operational log file when set."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    if settings.log_file:
        Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        logging.getLogger().addHandler(file_handler)


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    db_connected = await check_database_connection()
    if not db_connected:
        logger.error("Failed to connect to database on startup")
    elif settings.is_sqlite:
        # Local SQLite databases are created on demand; server databases use migrate.py
        await create_tables()

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Rental listing marketplace API.

    ## Features

    * **Listings**: Landlords publish and manage rental listings with images
    * **Search**: Filter active listings by city, rent range, gender, furnishing and free text
    * **Favorites & Inquiries**: Tenants save listings and contact landlords
    * **Admin**: Moderate users and listings and view platform statistics

    ## Conventions

    Each resource is a single URL; the operation is chosen with the `action` parameter
    (query string, form or JSON body). Every response is `{success, message, data?}`.

    ## Authentication

    Obtain a token from `/api/auth?action=login` and send it as `Authorization: Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and session checks"},
        {"name": "Listings", "description": "Listing management, search and detail"},
        {"name": "Favorites", "description": "Saved listings of the signed-in user"},
        {"name": "Inquiries", "description": "Tenant to landlord contact"},
        {"name": "Admin", "description": "Moderation and statistics"},
        {"name": "Uploads", "description": "Listing image uploads"},
        {"name": "Health", "description": "Service health"}
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    max_request_size=settings.max_request_size,
    slow_request_threshold=settings.slow_request_threshold,
    enable_request_logging=settings.debug
)

app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(listings_router, prefix=settings.api_prefix)
app.include_router(favorites_router, prefix=settings.api_prefix)
app.include_router(inquiries_router, prefix=settings.api_prefix)
app.include_router(admin_router, prefix=settings.api_prefix)
app.include_router(upload_router, prefix=settings.api_prefix)

# Stored images are referenced by listings as "<upload_url_prefix>/<filename>"
app.mount(
    f"/{settings.upload_url_prefix}",
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads"
)


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with the failure envelope."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    """Handle Pydantic validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors that escaped the service layer."""
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render routing errors such as 404 and 405 as envelopes."""
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    """Basic service information."""
    return success_response(f"Welcome to {settings.app_name}", {
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_prefix
    })


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    db_healthy = await check_database_connection()
    status = {
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_healthy else "unreachable"
    }

    if not db_healthy:
        logger.error("Health check failed: database unreachable")
        return JSONResponse(status_code=503, content=error_response("Service unhealthy", status))

    return success_response("Service healthy", status)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
