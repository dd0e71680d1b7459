from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from structlog import get_logger

from bakery.core.exceptions import AuthenticationError, TokenMalformedError, TokenRevokedError
from bakery.domain.entities.user import User
from bakery.infrastructure.dependency_injection.auth_dependencies import (
    TokenServiceDep,
    Trackers,
    UserRepositoryDep,
)

__all__ = [
    "TokenContext",
    "get_bearer_token",
    "get_token_context",
    "get_current_user",
]

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenContext:
    """A verified, non-revoked bearer token and its claims."""

    token: str
    claims: Dict[str, Any]


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


def get_bearer_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(_bearer)],
) -> str:
    if credentials is None or not credentials.credentials:
        raise TokenMalformedError("Authentication token missing")
    return credentials.credentials


def get_token_context(
    token: Annotated[str, Depends(get_bearer_token)],
    token_service: TokenServiceDep,
    trackers: Trackers,
) -> TokenContext:
    """Verify the token's signature and expiry, then reject it if revoked.

    The blacklist is consulted after signature verification and before any
    claim is trusted.
    """
    claims = token_service.decode_token(token)
    if trackers.token_blacklist.is_blacklisted(token):
        logger.warning("Revoked token presented", user_id=claims.get("sub"))
        raise TokenRevokedError()
    return TokenContext(token=token, claims=claims)


async def get_current_user(
    context: Annotated[TokenContext, Depends(get_token_context)],
    user_repository: UserRepositoryDep,
) -> User:
    """Return the authenticated :class:`~bakery.domain.entities.user.User`."""
    try:
        user_id = int(context.claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise TokenMalformedError() from exc

    user = await user_repository.get_by_id(user_id) if user_id > 0 else None
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive", code="user_not_found_or_inactive")
    return user
