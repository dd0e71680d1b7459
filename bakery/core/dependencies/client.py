"""Client identity helpers shared by middlewares and routes."""

from starlette.requests import HTTPConnection

from bakery.core.config.settings import settings
from bakery.domain.security.csrf import derive_fingerprint

UNKNOWN_CLIENT = "unknown"


def get_client_address(request: HTTPConnection) -> str:
    """Best-effort client IP.

    ``X-Forwarded-For`` is only honoured when ``TRUST_PROXY_HEADERS`` is set,
    otherwise any client could pick its own rate-limit key.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def get_csrf_session_key(request: HTTPConnection) -> str:
    """Fingerprint of client address and user agent used to bind CSRF tokens."""
    return derive_fingerprint(get_client_address(request), request.headers.get("user-agent", ""))
