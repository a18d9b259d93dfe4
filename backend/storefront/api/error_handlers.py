"""Error Handlers - one JSON error envelope for every failure the API returns.

Invariants:
    - Every error body is {"error": {code, message, category, severity, ...}}
      and carries the request_id of the call that produced it
    - StorefrontError keeps its own code and HTTP status
    - RequestValidationError -> 400 VALIDATION_ERROR with one detail per field
    - Framework HTTPExceptions (unknown route, wrong method) use the envelope too
    - Exception (catch-all) -> 500, never leaks internal details
    - Client-side failures (4xx) log at warning, server-side at error

Design Decisions:
    - Registered from main.py through register_error_handlers; handlers live
      here so the app module only wires things together
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.errors import ErrorCategory, ErrorSeverity, StorefrontError
from storefront.infrastructure.observability import current_request_id

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    404: ("NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND),
    405: ("METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION),
}


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def _envelope(status_code: int, error: dict) -> JSONResponse:
    error["request_id"] = current_request_id()
    return JSONResponse(status_code=status_code, content={"error": error})


async def storefront_error_handler(request: Request, exc: StorefrontError):
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(
        level,
        f"{exc.code}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return _envelope(exc.http_status, exc.to_response()["error"])


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Validation error on {request.url.path}: {[d['field'] for d in details]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _envelope(status.HTTP_400_BAD_REQUEST, {
        "code": "VALIDATION_ERROR",
        "message": "Invalid request data",
        "category": ErrorCategory.VALIDATION.value,
        "severity": ErrorSeverity.ERROR.value,
        "details": details,
    })


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code, category = _HTTP_CODES.get(
        exc.status_code, ("HTTP_ERROR", ErrorCategory.VALIDATION),
    )
    logger.warning(
        f"HTTP {exc.status_code} on {request.method} {request.url.path}",
        extra={"error_code": code, "path": request.url.path},
    )
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    response = _envelope(exc.status_code, {
        "code": code,
        "message": message,
        "category": category.value,
        "severity": ErrorSeverity.WARNING.value,
    })
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
        "category": ErrorCategory.INTERNAL.value,
        "severity": ErrorSeverity.CRITICAL.value,
    })
