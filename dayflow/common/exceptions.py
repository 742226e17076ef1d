"""Custom exceptions and JSON ``{"error": ...}`` error handlers."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for all application exceptions → ``{"error": detail}`` JSON."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        errors: Optional[dict[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.detail = detail
        self.errors = errors
        super().__init__(detail)


class BadRequestException(AppException):
    """400 — missing fields, invalid enum values, malformed input."""

    def __init__(
        self,
        detail: str = "Invalid payload",
        errors: Optional[dict[str, list[str]]] = None,
    ) -> None:
        super().__init__(status_code=400, detail=detail, errors=errors)


class UnauthorizedException(AppException):
    """401 — missing, invalid, expired or revoked bearer token."""

    def __init__(self, detail: str = "Invalid token") -> None:
        super().__init__(status_code=401, detail=detail)


class ForbiddenException(AppException):
    """403 — insufficient permissions."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action.",
    ) -> None:
        super().__init__(status_code=403, detail=detail)


class NotFoundException(AppException):
    """404 — entity not found."""

    def __init__(self, entity_type: str, entity_id: Any = None) -> None:
        detail = f"{entity_type} not found"
        if entity_id is not None:
            detail = f"{entity_type} '{entity_id}' not found"
        super().__init__(status_code=404, detail=detail)


class ConflictError(AppException):
    """409 — unique-constraint violation or invalid state transition."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=409, detail=detail)


# ── Body builder ────────────────────────────────────────────────────

def _error_body(detail: str, errors: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": detail}
    if errors:
        body["errors"] = errors
    return body


# ── FastAPI handlers ────────────────────────────────────────────────

async def _handle_app_exception(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, exc.errors),
    )


async def _handle_http_exception(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _handle_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = (
            ".".join(str(p) for p in loc[1:])
            if len(loc) > 1
            else str(loc[0]) if loc else "unknown"
        )
        field_errors.setdefault(name, []).append(err.get("msg", "Invalid value"))

    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid payload", field_errors),
    )


async def _handle_database_error(
    request: Request,
    exc: SQLAlchemyError,
) -> JSONResponse:
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


# ── Registration helper (called from main.py) ──────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _handle_database_error)      # type: ignore[arg-type]
