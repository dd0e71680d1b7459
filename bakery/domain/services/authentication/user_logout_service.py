"""User logout.

Tokens are stateless, so logging out means remembering the token as revoked
until it would have expired on its own. The caller's CSRF token is dropped at
the same time so a stolen page cannot keep submitting forms.
"""

from typing import Any, Dict, Optional

import structlog

from bakery.domain.security.csrf import CSRFTokenStore
from bakery.domain.security.token_blacklist import TokenBlacklist

logger = structlog.get_logger(__name__)


class UserLogoutService:
    def __init__(self, token_blacklist: TokenBlacklist, csrf_tokens: CSRFTokenStore):
        self.token_blacklist = token_blacklist
        self.csrf_tokens = csrf_tokens

    def logout(self, token: str, claims: Dict[str, Any], csrf_session_key: Optional[str] = None) -> None:
        """Revoke ``token`` until its ``exp`` claim and invalidate the CSRF token.

        Args:
            token: The raw bearer token presented by the client.
            claims: The token's verified claims.
            csrf_session_key: Session key of the caller's CSRF token, if any.

        Raises:
            TokenMalformedError: If the token or its expiry cannot be stored.
        """
        self.token_blacklist.add(token, claims.get("exp"))
        if csrf_session_key:
            self.csrf_tokens.invalidate_token(csrf_session_key)
        logger.info("User logged out", user_id=claims.get("sub"))
