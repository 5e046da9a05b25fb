from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tasvideos.core.settings import get_app_settings
from tasvideos.core.logging import configure_logging, correlation_id_var
from tasvideos.db.seed import seed_all
from tasvideos.db.session import dispose_engine, init_models
from tasvideos.schemas.common import ErrorInfo, ErrorResponse, MessageResponse

from tasvideos.api.routes.publications import router as publications_router

settings = get_app_settings()

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Publications", "description": "The publications of TASVideos."},
]

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=openapi_tags,
)

# Browsers reject credentialed requests to a wildcard origin.
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


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Bind a correlation id to the request for log records and error envelopes.

    Taken from X-Correlation-ID or X-Request-ID when the client sends one,
    otherwise generated, and echoed back as X-Correlation-ID.
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
        error=ErrorInfo(type=error_type, message=message, details=jsonable_encoder(details)),
        correlation_id=corr,
        path=request.url.path,
        method=request.method,
        timestamp=ts,
    )
    return JSONResponse(status_code=status_code, content=err.model_dump(mode="json"))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Wrap HTTPExceptions in the ErrorResponse envelope.

    A 400 raised with a mapping detail is a parameter validation failure; the
    mapping (parameter name -> messages) becomes the error details.
    """
    if exc.status_code == status.HTTP_400_BAD_REQUEST and isinstance(exc.detail, dict):
        return _build_error_response(
            request=request,
            status_code=exc.status_code,
            error_type="validation_error",
            message="Request validation failed",
            details=exc.detail,
        )
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_type = "not_found"
    else:
        error_type = "http_error"
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _build_error_response(
        request=request,
        status_code=exc.status_code,
        error_type=error_type,
        message=str(detail),
        details=None if isinstance(exc.detail, str) else exc.detail,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed path or query parameters are reported as 400 validation_error."""
    return _build_error_response(
        request=request,
        status_code=status.HTTP_400_BAD_REQUEST,
        error_type="validation_error",
        message="Request validation failed",
        details=exc.errors(),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures and answer 500 without exposing internals."""
    logger.exception("Unhandled error processing request")
    return _build_error_response(
        request=request,
        status_code=500,
        error_type="internal_error",
        message="An unexpected error occurred",
        details=None,
    )


@app.on_event("startup")
async def on_startup() -> None:
    """
    Create the schema and seed reference data on startup when enabled in settings.
    """
    if settings.CREATE_SCHEMA_ON_STARTUP:
        logger.info("Creating database schema")
        await init_models()

    if settings.AUTO_SEED:
        try:
            logger.info("Running database seeding...")
            await seed_all()
            logger.info("Seeding completed.")
        except Exception as exc:
            logger.exception("Seeding step failed: %s", exc)
            # Safe to continue without seed; environments may not require it.


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await dispose_engine()


api_v1 = APIRouter(prefix="/api/v1")


# PUBLIC_INTERFACE
@api_v1.get(
    "/health",
    response_model=MessageResponse,
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> MessageResponse:
    """Liveness probe; does not touch the database."""
    return MessageResponse(message="Healthy")


api_v1.include_router(publications_router)

app.include_router(api_v1)
