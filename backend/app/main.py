"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.logging_config import setup_logging
from app.core.screening import build_catalog
from app.middleware import RequestLoggingMiddleware
from app.models import init_db
from app.services.assessments import SessionRegistry, profile_from_settings

# Initialize logging configuration at startup
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    - On startup: creates missing result tables
    - On shutdown: logs how many in-memory sessions were left unfinished
    """
    await init_db()
    logger.info(
        f"{settings.APP_NAME} {settings.APP_VERSION} started "
        f"(env={settings.ENV}, tests={len(app.state.catalog)})"
    )
    yield
    logger.info(
        f"{settings.APP_NAME} shutting down with "
        f"{len(app.state.session_registry)} unfinished sessions"
    )


# OpenAPI tags metadata for better documentation organization
tags_metadata = [
    {
        "name": "health",
        "description": "Health check and status endpoints.",
    },
    {
        "name": "assessments",
        "description": (
            "Screening test catalog, test sessions (present, respond, submit, "
            "abandon) and stored assessment results."
        ),
    },
]


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    The test catalog is built once from the configured baseline scoring
    profile and stored on app.state together with the session registry.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "**Dyslexia Screening API** - scoring and risk classification for "
            "short reading, phonological, memory, sequencing and spelling "
            "screening tests.\n\n"
            "Results are a screening indication only, not a diagnosis."
        ),
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    app.state.catalog = build_catalog(profile_from_settings(settings))
    app.state.session_registry = SessionRegistry(
        ttl_seconds=settings.SESSION_TTL_SECONDS
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    # Configure Request Logging
    app.add_middleware(RequestLoggingMiddleware)

    # Include API routers
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Return HTTP errors as {"detail": ...}.
        """
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle request validation errors.
        """
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        ]
        logger.info(
            f"Rejected invalid request to {request.url.path}: {len(errors)} errors",
            extra={"method": request.method, "path": str(request.url.path)},
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id (UUID) that is returned to the client and
        logged with the full exception, so support can trace the failure.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={"method": request.method, "path": str(request.url.path)},
        )

        # Don't leak internal details
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )

    return app


app = create_application()


@app.get("/")
async def root():
    """
    Root endpoint.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }
