"""Middleware configuration for the FastAPI application.

This module handles the configuration and registration of all middleware
components. From the outside in, a request passes through:

1. request logging
2. security headers
3. the Starlette session (holds the Google OAuth ``state``)
4. CORS
5. the general per-address rate limiter
6. input sanitization of JSON bodies and query strings
7. CSRF verification of state-changing requests

Sanitization and CSRF are plain ASGI middlewares because they have to read
and, for sanitization, rewrite the request body before the route sees it.
"""

import json
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from bakery.core.config.settings import settings
from bakery.core.dependencies.client import get_client_address, get_csrf_session_key
from bakery.core.exceptions import CSRFInvalidError, CSRFMissingError, RateLimitExceededError
from bakery.core.handlers import permission_error_handler, rate_limit_error_handler
from bakery.domain.security.trackers import SecurityTrackers
from bakery.domain.validation.input_sanitizer import (
    is_password_field,
    sanitize_input,
    sanitize_object,
)

logger = structlog.get_logger(__name__)

CSRF_HEADER = "x-csrf-token"
CSRF_BODY_FIELD = "_csrf"
CSRF_PROTECTED_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' https://accounts.google.com https://apis.google.com",
        "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src 'self' https://fonts.gstatic.com",
        "img-src 'self' data: https:",
        "connect-src 'self' https://api.brevo.com https://accounts.google.com",
        "frame-src 'self' https://accounts.google.com",
        "base-uri 'self'",
        "form-action 'self'",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=()",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-DNS-Prefetch-Control": "off",
}

USER_AGENT_LOG_LENGTH = 100


def configure_middleware(app: FastAPI) -> None:
    """Configure all middleware for the FastAPI application.

    Starlette wraps each added middleware around the previous ones, so they
    are registered from the innermost to the outermost.

    Args:
        app (FastAPI): The FastAPI application instance
    """
    app.add_middleware(CSRFMiddleware)
    app.add_middleware(InputSanitizationMiddleware)
    app.middleware("http")(rate_limit_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-CSRF-Token"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY.get_secret_value(),
        same_site="lax",
        https_only=not settings.is_development and settings.APP_ENV != "test",
    )
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_logging_middleware)


# ---------------------------------------------------------------------------
# Function middlewares
# ---------------------------------------------------------------------------


async def request_logging_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Log one line per request. Bodies and query values are never logged."""
    start_time = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        client_ip=get_client_address(request),
        user_agent=request.headers.get("user-agent", "")[:USER_AGENT_LOG_LENGTH],
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return response


async def security_headers_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers[header] = value
    return response


async def rate_limit_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Count every request against the caller's address.

    Allowed responses carry ``X-RateLimit-Limit`` and ``X-RateLimit-Remaining``;
    denied ones are a 429 with ``retryAfter`` in minutes.
    """
    if not settings.RATE_LIMIT_ENABLED:
        return await call_next(request)

    trackers: SecurityTrackers = request.app.state.security
    decision = trackers.rate_limiter.can_request(get_client_address(request))
    if not decision.allowed:
        response = await rate_limit_error_handler(request, RateLimitExceededError(decision.remaining_minutes))
        response.headers["X-RateLimit-Limit"] = str(decision.limit)
        response.headers["X-RateLimit-Remaining"] = "0"
        return response

    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(decision.limit)
    response.headers["X-RateLimit-Remaining"] = str(decision.remaining)
    return response


# ---------------------------------------------------------------------------
# ASGI body helpers
# ---------------------------------------------------------------------------


async def _read_body(receive: Receive) -> bytes:
    chunks: List[bytes] = []
    while True:
        message = await receive()
        if message["type"] != "http.request":
            break
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


def _replay(body: bytes, receive: Receive) -> Receive:
    """A ``receive`` that yields ``body`` once, then defers to the original channel."""
    sent = False

    async def replay() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def _content_type(scope: Scope) -> str:
    for name, value in scope.get("headers", []):
        if name == b"content-type":
            return value.decode("latin-1").split(";")[0].strip().lower()
    return ""


def _with_content_length(headers: List[Tuple[bytes, bytes]], length: int) -> List[Tuple[bytes, bytes]]:
    rewritten = [(name, value) for name, value in headers if name != b"content-length"]
    rewritten.append((b"content-length", str(length).encode("latin-1")))
    return rewritten


def _sanitize_query_string(query_string: bytes) -> bytes:
    pairs = []
    for key, value in parse_qsl(query_string.decode("latin-1"), keep_blank_values=True):
        if key.startswith("$"):
            continue
        pairs.append((key, value if is_password_field(key) else sanitize_input(value)))
    return urlencode(pairs).encode("latin-1")


class InputSanitizationMiddleware:
    """Rewrites JSON bodies and query strings before routing.

    Strings are HTML-escaped and stripped of ``$ { } [ ]``; keys starting with
    ``$`` are dropped. Password fields pass through untouched. A body that
    claims to be JSON but does not parse is rejected with 400.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        scope = dict(scope)
        if scope.get("query_string"):
            scope["query_string"] = _sanitize_query_string(scope["query_string"])

        if _content_type(scope) != "application/json" or scope["method"] in ("GET", "HEAD", "OPTIONS"):
            await self.app(scope, receive, send)
            return

        body = await _read_body(receive)
        if body.strip():
            try:
                payload = json.loads(body)
            except ValueError:
                logger.warning("invalid_json_body", path=scope.get("path"))
                response = JSONResponse(status_code=400, content={"detail": "Invalid input data"})
                await response(scope, receive, send)
                return
            body = json.dumps(sanitize_object(payload)).encode("utf-8")
            scope["headers"] = _with_content_length(list(scope.get("headers", [])), len(body))

        await self.app(scope, _replay(body, receive), send)


class CSRFMiddleware:
    """Verifies the CSRF token on state-changing requests.

    The token is read from the ``x-csrf-token`` header or, failing that, from a
    ``_csrf`` field in a JSON or form-encoded body. Tokens are bound to the
    client fingerprint. Paths in ``CSRF_EXEMPT_PATHS`` are skipped because
    they come before a client has had a chance to fetch a token.
    """

    def __init__(self, app: ASGIApp, exempt_paths: Optional[List[str]] = None) -> None:
        self.app = app
        self.exempt_paths = set(settings.CSRF_EXEMPT_PATHS if exempt_paths is None else exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if (
            scope["type"] != "http"
            or not settings.CSRF_ENABLED
            or scope["method"] not in CSRF_PROTECTED_METHODS
            or scope["path"] in self.exempt_paths
        ):
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        candidate = request.headers.get(CSRF_HEADER)
        body: Optional[bytes] = None
        if not candidate:
            body = await _read_body(receive)
            candidate = _token_from_body(_content_type(scope), body)

        if body is not None:
            receive = _replay(body, receive)

        if not candidate:
            response = await permission_error_handler(request, CSRFMissingError())
            await response(scope, receive, send)
            return

        trackers: SecurityTrackers = request.app.state.security
        if not trackers.csrf_tokens.verify_token(get_csrf_session_key(request), candidate):
            response = await permission_error_handler(request, CSRFInvalidError())
            await response(scope, receive, send)
            return

        await self.app(scope, receive, send)


def _token_from_body(content_type: str, body: bytes) -> Optional[str]:
    if not body:
        return None
    if content_type == "application/json":
        try:
            payload: Any = json.loads(body)
        except ValueError:
            return None
        value = payload.get(CSRF_BODY_FIELD) if isinstance(payload, dict) else None
        return value if isinstance(value, str) else None
    if content_type == "application/x-www-form-urlencoded":
        fields: Dict[str, str] = dict(parse_qsl(body.decode("latin-1")))
        return fields.get(CSRF_BODY_FIELD)
    return None
