"""
Application exceptions and the error envelope
Every failure reaches the client as {success: false, message, error}
"""

import logging
from typing import Any, Dict, Optional

import sentry_sdk
from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_SERVER_MESSAGE = "An unexpected error occurred. Please try again later."


class TechQuizException(Exception):
    """
    Base exception for TechQuiz

    Subclasses pick the HTTP status and error code; callers supply the
    message and, optionally, structured details for the client.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(TechQuizException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class QuizException(TechQuizException):
    """Quiz exists but cannot serve the request, e.g. it has no questions"""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "QUIZ_ERROR"
    default_message = "Quiz operation failed"


class AuthenticationException(TechQuizException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_ERROR"
    default_message = "Authentication failed"


class AuthorizationException(TechQuizException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "AUTHORIZATION_ERROR"
    default_message = "Insufficient permissions"


class NotFoundException(TechQuizException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource", details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{resource} not found", details=details)


class DuplicateException(TechQuizException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "DUPLICATE_ERROR"

    def __init__(self, resource: str = "Resource", details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{resource} already exists", details=details)


class RateLimitException(TechQuizException):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "RATE_LIMIT_ERROR"
    default_message = "Rate limit exceeded"


class DatabaseException(TechQuizException):
    """Store failure; nothing was written and the caller may retry"""
    error_code = "DATABASE_ERROR"
    default_message = "Database operation failed"


def create_error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the standard error envelope for ``request``"""
    error = {
        "code": error_code,
        "details": details or {},
        "path": request.url.path,
        "method": request.method,
    }
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        error["request_id"] = request_id

    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
        headers=headers,
    )


async def techquiz_exception_handler(request: Request, exc: TechQuizException) -> JSONResponse:
    server_error = exc.status_code >= 500
    (logger.error if server_error else logger.info)(
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.error_code, "status_code": exc.status_code, "path": request.url.path},
    )

    if server_error and settings.SENTRY_DSN:
        sentry_sdk.capture_exception(exc)

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    message = GENERIC_SERVER_MESSAGE if server_error and settings.is_production() else exc.message

    return create_error_response(
        request,
        exc.status_code,
        exc.error_code,
        message,
        details=None if server_error else exc.details,
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework-raised HTTP errors: unknown routes, wrong methods"""
    logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}")

    message = str(exc.detail)
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "API endpoint not found"

    return create_error_response(
        request, exc.status_code, "HTTP_ERROR", message, headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Request body or query failed schema validation

    Reported as 400 with the first problem as the message, so field
    validators can phrase user-facing errors directly.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.info("Validation error", extra={"errors": errors, "path": request.url.path})

    message = errors[0]["message"].removeprefix("Value error, ") if errors else "Request validation failed"
    return create_error_response(
        request, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details={"errors": errors}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    if settings.SENTRY_DSN:
        sentry_sdk.capture_exception(exc)

    message = GENERIC_SERVER_MESSAGE if settings.is_production() else str(exc)
    return create_error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(TechQuizException, techquiz_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
