import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jwt import ExpiredSignatureError, PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from structlog import get_logger

from bakery.core.config.settings import settings
from bakery.core.exceptions import TokenExpiredError, TokenMalformedError
from bakery.domain.entities.user import User

logger = get_logger(__name__)

REQUIRED_CLAIMS = ["sub", "exp", "iat", "jti"]


class TokenService:
    """Service for issuing and verifying session JWTs.

    Tokens are HS256-signed with ``JWT_SECRET`` and live for
    ``ACCESS_TOKEN_EXPIRE_DAYS``. There are no refresh tokens: a client signs
    in again when its token expires, and logout revokes a token by adding it
    to the in-memory blacklist until its ``exp``.

    Attributes:
        secret (str): Signing key.
        algorithm (str): JWS algorithm name.
        expire_days (int): Token lifetime in days.
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_days: Optional[int] = None,
    ):
        self.secret = secret or settings.JWT_SECRET.get_secret_value()
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expire_days = expire_days or settings.ACCESS_TOKEN_EXPIRE_DAYS

    def create_access_token(self, user: User) -> str:
        """Create a signed token carrying the user's id, email and role.

        Args:
            user (User): User for whom to create the token.

        Returns:
            str: Encoded JWT.
        """
        now = datetime.now(timezone.utc)
        jti = secrets.token_urlsafe(24)
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
            "iat": now,
            "exp": now + timedelta(days=self.expire_days),
            "jti": jti,
        }
        token = jwt_encode(payload, self.secret, algorithm=self.algorithm)
        logger.debug("Access token created", user_id=user.id, jti=jti[:8])
        return token

    def decode_token(self, token: str) -> Dict[str, Any]:
        """Verify the signature and expiry of ``token`` and return its claims.

        Raises:
            TokenExpiredError: If the token's ``exp`` has passed.
            TokenMalformedError: If the token is empty, tampered with or unreadable.
        """
        if not token:
            raise TokenMalformedError()
        try:
            return jwt_decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError() from e
        except PyJWTError as e:
            logger.warning("Token verification failed", error=str(e))
            raise TokenMalformedError() from e
