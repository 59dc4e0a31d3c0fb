from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from src.core.context import AppContext, open_app_context
from src.core.deps import get_app_context
from src.core.errors import StorageError, TrackingError
from src.core.logging import configure_logging, correlation_id_var
from src.core.settings import AppSettings, get_app_settings
from src.db.config import Settings, get_settings
from src.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

# Routers
from src.api.routes.production import router as production_router
from src.api.routes.quality import router as quality_router

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness and readiness probes."},
    {"name": "Production", "description": "Production order lifecycle."},
    {"name": "Quality", "description": "Inspections and the failure taxonomy."},
]


def _build_error_response(
    request: Request,
    status_code: int,
    error_type: str,
    message: str,
    details: Any | None = None,
) -> JSONResponse:
    """Build a standardized ErrorResponse JSONResponse."""
    ts = datetime.now(tz=timezone.utc)
    corr = getattr(request.state, "correlation_id", None)
    err = ErrorResponse(
        status=status_code,
        error=ErrorInfo(type=error_type, message=message, details=details),
        correlation_id=corr,
        path=request.url.path,
        method=request.method,
        timestamp=ts,
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"))


async def tracking_error_handler(request: Request, exc: TrackingError):
    """
    Map the domain error taxonomy to HTTP statuses.

    Storage failures keep an opaque message; the cause is only logged.
    """
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=exc.error_type,
        message=exc.message,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Global handler for HTTPException to produce a standardized error envelope.
    """
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type="http_error",
        message=str(detail),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed request bodies and parameters are client errors (400).
    """
    return _build_error_response(
        request=request,
        status_code=400,
        error_type="validation_error",
        message="Request validation failed",
        details=jsonable_encoder(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces and to return a structured error.
    """
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type="internal_error",
        message="An unexpected error occurred",
        details=None,
    )


async def request_context_middleware(request: Request, call_next):
    """
    Enrich request context with correlation_id for logging and error responses.
    Adds 'X-Correlation-ID' to every response.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)

    response.headers["X-Correlation-ID"] = corr
    return response


def _build_api_router() -> APIRouter:
    api_v1 = APIRouter(prefix="/api/v1")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health",
        response_model=MessageResponse,
        summary="Health Check",
        tags=["Health"],
    )
    def health_check() -> MessageResponse:
        """
        Basic liveness health check endpoint.

        Returns:
            MessageResponse: Simple confirmation that the service is running.
        """
        return MessageResponse(message="Healthy")

    # PUBLIC_INTERFACE
    @api_v1.get(
        "/health/db",
        response_model=MessageResponse,
        summary="Database Readiness",
        description="Runs a trivial statement against the relational store.",
        tags=["Health"],
    )
    async def database_health(ctx: AppContext = Depends(get_app_context)) -> MessageResponse:
        try:
            async with ctx.session_maker() as session:
                await session.execute(text("SELECT 1"))
        except Exception as exc:
            raise StorageError("Database not reachable") from exc
        return MessageResponse(message="Database reachable")

    api_v1.include_router(production_router)
    api_v1.include_router(quality_router)
    return api_v1


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[AppSettings] = None,
    db_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The store connection is opened in the lifespan; a missing DSN or a failed
    initial connection raises FatalStartupError and aborts startup.
    """
    settings = settings or get_app_settings()
    db_settings = db_settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = await open_app_context(settings, db_settings)
        app.state.context = ctx
        logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
        try:
            yield
        finally:
            await ctx.close()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )

    # CORS - avoid wildcard with credentials
    cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
    if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
        logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
        cors_allow_credentials = False

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=cors_allow_credentials,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(TrackingError, tracking_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(_build_api_router())
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the application with uvicorn using HOST/PORT from the environment."""
    import uvicorn

    settings = get_app_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)
