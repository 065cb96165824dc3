"""Mapping of domain exceptions onto HTTP error responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from subnetsearch.api.schemas import APIError, ErrorDetail
from subnetsearch.config import get_settings
from subnetsearch.core.exceptions import (
    BackingStoreError,
    BackingStoreUnavailableError,
    IndexNotFoundError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def error_response(
    status_code: int,
    code: str,
    message: str,
    field: str | None = None,
    details: dict | None = None,
) -> JSONResponse:
    body = APIError(error=ErrorDetail(code=code, message=message, field=field, details=details))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_response(400, "invalid_parameter", exc.message, field=exc.field)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response(400, "invalid_parameter", "Invalid request")
    first = errors[0]
    loc = [part for part in first.get("loc", ()) if part not in ("query", "path", "body")]
    field = str(loc[-1]) if loc else None
    message = f"Invalid value for '{field}': {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(400, "invalid_parameter", message, field=field)


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    code = "index_not_found" if isinstance(exc, IndexNotFoundError) else "not_found"
    return error_response(404, code, exc.message)


async def _unavailable_handler(request: Request, exc: BackingStoreUnavailableError) -> JSONResponse:
    logger.error(f"{exc.store} unavailable while serving {request.url.path}: {exc.message}")
    message = exc.message if get_settings().expose_error_details else "Service temporarily unavailable"
    return error_response(503, "service_unavailable", message, details={"retryable": True})


async def _backing_store_handler(request: Request, exc: BackingStoreError) -> JSONResponse:
    logger.error(f"Backing store failure while serving {request.url.path}: {exc.message}")
    message = exc.message if get_settings().expose_error_details else "Internal server error"
    return error_response(500, "backing_store_error", message)


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers; more specific exception classes win."""
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(BackingStoreUnavailableError, _unavailable_handler)
    app.add_exception_handler(BackingStoreError, _backing_store_handler)
