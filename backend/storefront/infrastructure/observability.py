"""Structured Logging - JSON formatter, request context and access log.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Every record emitted while serving a request carries its request_id
    - Extra fields (error_code, path, resource ids) surfaced when present
    - JSON format in production, human-readable in development
    - Calling setup_logging twice never duplicates handlers

Design Decisions:
    - setup_logging called once on startup via lifespan
    - Extra keys are whitelisted so arbitrary record attributes never leak
    - request_id lives in a ContextVar so services log it without taking a
      request argument
"""

import logging
import json
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from fastapi import Request

LOG_EXTRA_FIELDS = (
    "request_id", "method", "path", "status_code", "duration_ms", "error_code",
    "user_id", "category_id", "product_id", "proposal_id", "invoice_id",
    "calculator_id",
)

REQUEST_ID_HEADER = "X-Request-Id"

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_HANDLER_NAME = "storefront"

access_logger = logging.getLogger("storefront.access")


def current_request_id() -> str | None:
    return _request_id.get()


class RequestContextFilter(logging.Filter):
    """Stamp the active request_id onto every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = _request_id.get()
        return True


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in LOG_EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.addFilter(RequestContextFilter())
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(request_id)s] - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


async def log_requests(request: Request, call_next):
    """HTTP middleware: bind a request id, time the call, write one access line."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = _request_id.set(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        response.headers[REQUEST_ID_HEADER] = request_id
        access_logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
    finally:
        _request_id.reset(token)
