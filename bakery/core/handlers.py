from __future__ import annotations

"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into appropriate HTTP responses. Every body has a
``detail`` message; throttling and login errors add the extra fields the
storefront relies on (``retryAfter``, ``lockedUntil``, ``attemptsLeft``,
``needsVerification``). The middlewares call these same functions so a
denial looks identical whether it came from a route or from the stack.
"""

from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from structlog import get_logger

from bakery.core.dependencies.client import get_client_address
from bakery.core.exceptions import (
    AuthenticationError,
    BakeryError,
    DatabaseError,
    EmailNotVerifiedError,
    EmailServiceError,
    InvalidCredentialsError,
    LockedOutError,
    PermissionError,
    RateLimitError,
    TokenError,
    UserNotFoundError,
    ValidationError,
)

__all__ = [
    "authentication_error_handler",
    "permission_error_handler",
    "rate_limit_error_handler",
    "validation_error_handler",
    "request_validation_error_handler",
    "user_not_found_error_handler",
    "email_service_error_handler",
    "database_error_handler",
    "bakery_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Wrong credentials report how many attempts remain before the lockout,
    and an unverified account is flagged so the client can offer to resend
    the verification code.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and error detail.
    """
    logger.warning(
        "Authentication failure",
        error=exc.code,
        client_ip=get_client_address(request),
        path=request.url.path,
    )
    content: Dict[str, Any] = {"detail": exc.message}
    headers = None
    if isinstance(exc, InvalidCredentialsError) and exc.attempts_left is not None:
        content["attemptsLeft"] = exc.attempts_left
    elif isinstance(exc, EmailNotVerifiedError):
        content["needsVerification"] = True
        content["email"] = exc.email
    elif isinstance(exc, TokenError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content=content, headers=headers)


async def permission_error_handler(request: Request, exc: PermissionError) -> JSONResponse:
    """Handles `PermissionError`, returning a `403 Forbidden`.

    Covers inactive accounts and CSRF failures as well as plain
    authorization denials.
    """
    logger.warning(
        "Permission denied",
        error=exc.code,
        client_ip=get_client_address(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"detail": exc.message},
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handles every throttling denial, returning a `429 Too Many Requests`.

    Lockouts carry ``lockedUntil`` and quota denials carry ``retryAfter``,
    both in whole minutes. The standard ``Retry-After`` header is set in
    seconds.

    Args:
        request: The incoming `Request` object.
        exc: The `RateLimitError` instance.

    Returns:
        A `JSONResponse` with a 429 status code and error detail.
    """
    logger.warning(
        "rate_limit_exceeded",
        error=exc.code,
        client_ip=get_client_address(request),
        path=request.url.path,
        retry_after_minutes=exc.retry_after_minutes,
    )
    content: Dict[str, Any] = {"detail": exc.message}
    if isinstance(exc, LockedOutError):
        content["lockedUntil"] = exc.retry_after_minutes
    else:
        content["retryAfter"] = exc.retry_after_minutes
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=content,
        headers={"Retry-After": str(exc.retry_after_minutes * 60)},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`.

    Covers password policy failures and duplicate registrations as well.
    """
    content: Dict[str, Any] = {"detail": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reports malformed request bodies as `400 Bad Request` with per-field messages."""
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"), "message": error.get("msg")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


async def user_not_found_error_handler(request: Request, exc: UserNotFoundError) -> JSONResponse:
    """Handles `UserNotFoundError`, returning a `404 Not Found`."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.message},
    )


async def email_service_error_handler(request: Request, exc: EmailServiceError) -> JSONResponse:
    """Handles `EmailServiceError`, returning a `503 Service Unavailable`.

    Services swallow delivery failures after logging them, so this only
    fires if one escapes a route.
    """
    logger.error(
        "Email service interaction failed",
        error_message=str(exc),
        client_ip=get_client_address(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    """Handles `DatabaseError`, returning a `500 Internal Server Error`.

    The underlying error is logged but never sent to the client.
    """
    logger.critical(
        "A critical database error occurred",
        error_message=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "A database error occurred."},
    )


async def bakery_error_handler(request: Request, exc: BakeryError) -> JSONResponse:
    """Fallback for application errors without a more specific handler."""
    logger.error(
        "An unhandled application error occurred",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Starlette resolves handlers along the exception's MRO, so the most
    specific registered base class wins.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(PermissionError, permission_error_handler)
    app.add_exception_handler(RateLimitError, rate_limit_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(UserNotFoundError, user_not_found_error_handler)
    app.add_exception_handler(EmailServiceError, email_service_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(BakeryError, bakery_error_handler)
