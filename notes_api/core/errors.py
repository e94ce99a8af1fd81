"""
Error taxonomy shared by repositories, services and routers.

Each error carries the HTTP status it maps to and a message that is safe to
show to clients. ``register_exception_handlers`` converts them into the
``{"success": false, "message": ...}`` envelope used by every endpoint.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class NotesError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(NotesError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateEmail(NotesError):
    status_code = 400
    default_message = "An account with this email already exists"


class InvalidCredentials(NotesError):
    status_code = 401
    default_message = "Invalid email or password"


class Unauthenticated(NotesError):
    status_code = 401
    default_message = "Authentication required"


class TokenExpiredOrInvalid(NotesError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(NotesError):
    status_code = 404
    default_message = "Not found"


class StorageUnavailable(NotesError):
    status_code = 500
    default_message = "Storage is temporarily unavailable"


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


def register_exception_handlers(app: FastAPI) -> None:
    """Map NotesError subclasses and request schema errors to JSON responses."""

    @app.exception_handler(NotesError)
    async def notes_error_handler(request: Request, exc: NotesError) -> JSONResponse:
        if isinstance(exc, StorageUnavailable):
            logger.error("Storage failure on %s %s: %r", request.method, request.url.path, exc.__cause__ or exc)
            # no paths or OS errors in the response
            return JSONResponse(status_code=exc.status_code, content=error_body(StorageUnavailable.default_message))
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
        message = f"Invalid field '{field}': {first.get('msg', 'invalid value')}"
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=getattr(exc, "headers", None))
