"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from authcore.core.config import get_settings
from authcore.domain.exceptions import AuthcoreException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "HOST_REQUIRED": 400,
    "UNKNOWN_PERMISSION": 400,
    "SYNTHETIC_ASSIGNMENT": 400,
    "NOT_AUTHENTICATED": 401,
    "PERMISSION_DENIED": 403,
    "PERSON_NOT_IN_TENANT": 403,
    "TENANT_MISMATCH": 403,
    "NO_TENANT": 404,
    "RESOURCE_NOT_FOUND": 404,
    "DUPLICATE_ASSIGNMENT": 409,
    "DATA_LAYER_ERROR": 500,
}


def status_for(exc: AuthcoreException) -> int:
    """HTTP status for a domain exception (400 when the code is unmapped)."""
    return ERROR_CODE_STATUS.get(exc.error_code, 400)


def _authcore_exception_handler(
    request: Request, exc: AuthcoreException
) -> JSONResponse:
    """Return JSON from AuthcoreException.to_dict() with the mapped status."""
    return JSONResponse(status_code=status_for(exc), content=exc.to_dict())


def _sqlalchemy_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Return 500 DATA_LAYER_ERROR; the underlying error only goes to the log."""
    logger.exception(
        "Data layer error on %s %s: %s", request.method, request.url.path, exc
    )
    return JSONResponse(
        status_code=500,
        content={"error": "DATA_LAYER_ERROR", "message": "Internal server error"},
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Pydantic error dicts with the non-serializable ctx/input entries dropped."""
    return [
        {k: v for k, v in err.items() if k not in ("ctx", "input", "url")}
        for err in exc.errors()
    ]


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: AuthcoreException (and
    subclasses), SQLAlchemyError, RequestValidationError,
    StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(AuthcoreException, _authcore_exception_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
