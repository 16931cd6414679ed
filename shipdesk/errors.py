"""Application exceptions and the FastAPI handlers that render them.

Every failure leaves the API as a JSON body carrying a ``msg`` field.
Unexpected errors are logged server-side and answered with a generic
"Server error" so no internals reach the caller.
"""

import logging
from typing import Any, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"
RATE_LIMIT_MESSAGE = "Too many login attempts. Please try again later."


class AppException(Exception):
    """Base application exception."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(AppException):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(AppException):
    """Missing or invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class Forbidden(AppException):
    """Authenticated, but the role is not allowed to perform the action."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(AppException):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppException):
    """Duplicate carrier, vendor or account.

    Answered with 400 to stay compatible with existing admin clients.
    """

    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(AppException):
    """The backing store failed in a way the caller cannot fix."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = SERVER_ERROR_MESSAGE):
        super().__init__(message)


def _error_body(message: str, details: Optional[List[Any]] = None) -> dict:
    body = {"msg": message}
    if details:
        body["errors"] = jsonable_encoder(details)
    return body


def _validation_message(error: dict) -> str:
    message = str(error.get("msg", "Invalid request"))
    # pydantic prefixes messages raised from custom validators
    return message.removeprefix("Value error, ")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if isinstance(exc, StorageError):
            logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.__cause__!r}")
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = _validation_message(errors[0]) if errors else "Invalid request"
        cleaned = [
            {"loc": list(error.get("loc", ())), "msg": _validation_message(error), "type": error.get("type")}
            for error in errors
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body(message, cleaned),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning(f"Rate limit hit on {request.url.path} ({exc.detail})")
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=_error_body(RATE_LIMIT_MESSAGE),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(SERVER_ERROR_MESSAGE),
        )
