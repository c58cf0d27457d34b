"""Domain exceptions and the handlers that turn them into enveloped responses."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .jobs.runner import JobQueueFullError
from .schemas.envelope import ApiResponse, FieldErrors

logger = logging.getLogger(__name__)


class FleetApiError(Exception):
    """Base for errors a request handler raises on purpose."""

    status_code = 400


class RecordNotFoundError(FleetApiError):
    status_code = 404


class JobNotFoundError(FleetApiError):
    status_code = 404


class ForbiddenError(FleetApiError):
    """The record belongs to another company, or the caller's role is too low."""

    status_code = 403


class InvalidOperationError(FleetApiError):
    """Well-formed request that the current state does not allow."""

    status_code = 422


class ValidationFailedError(FleetApiError):
    """A business rule rejected the payload; ``errors`` holds messages per field."""

    status_code = 422

    def __init__(self, message: str = "Validation failed", errors: Optional[FieldErrors] = None) -> None:
        super().__init__(message)
        self.errors = errors or {}


def _respond(status_code: int, body: ApiResponse, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def _field_name(loc) -> str:
    # ("body", "odometer") -> "odometer"; ("body",) -> "body"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or "body"


async def _fleet_error(request: Request, exc: FleetApiError) -> JSONResponse:
    return _respond(exc.status_code, ApiResponse.fail(str(exc), errors=getattr(exc, "errors", None)))


async def _queue_full(request: Request, exc: JobQueueFullError) -> JSONResponse:
    return _respond(429, ApiResponse.fail(str(exc)))


async def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        errors.setdefault(_field_name(err.get("loc", ())), []).append(err.get("msg", "Invalid value"))
    return _respond(422, ApiResponse.fail("Validation failed", errors=errors))


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _respond(exc.status_code, ApiResponse.fail(str(exc.detail)), getattr(exc, "headers", None))


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _respond(500, ApiResponse.fail("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FleetApiError, _fleet_error)
    app.add_exception_handler(JobQueueFullError, _queue_full)
    app.add_exception_handler(RequestValidationError, _request_invalid)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled)
