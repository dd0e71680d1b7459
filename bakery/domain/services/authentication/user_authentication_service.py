from dataclasses import dataclass

from structlog import get_logger

from bakery.core.exceptions import (
    EmailNotVerifiedError,
    InactiveAccountError,
    InvalidCredentialsError,
    LockedOutError,
)
from bakery.core.logging import mask_email
from bakery.domain.entities.user import User, utcnow
from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.interfaces.services import IPasswordHasher
from bakery.domain.security.login_attempts import LoginAttemptTracker
from bakery.domain.services.auth.token import TokenService

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthenticatedSession:
    user: User
    access_token: str


class UserAuthenticationService:
    """
    Email/password sign-in guarded by the failed-login lockout tracker.

    The order of checks matters:

    1. A locked account is rejected before the password is looked at.
    2. Unknown emails run a dummy bcrypt verification and count as a failed
       attempt, so they are indistinguishable from wrong passwords.
    3. Only a correct password clears the attempt counter. Verification and
       active-account checks come after, so their errors never leak whether
       a guessed password was right for a locked or unknown account.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_service: TokenService,
        login_attempts: LoginAttemptTracker,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.token_service = token_service
        self.login_attempts = login_attempts

    async def authenticate(self, email: str, password: str) -> AuthenticatedSession:
        """
        Authenticate a user and issue a session token.

        Raises:
            LockedOutError: If the account is locked, or this failure locked it.
            InvalidCredentialsError: If the email or password is wrong.
            EmailNotVerifiedError: If the password is right but the email is unverified.
            InactiveAccountError: If the account has been deactivated.
        """
        identifier = email.strip().lower()

        lock = self.login_attempts.is_locked(identifier)
        if lock.locked:
            logger.warning("Login attempt on locked account", email=mask_email(identifier))
            raise LockedOutError(lock.remaining_minutes)

        user = await self.user_repository.get_by_email(identifier)
        if user is None:
            self.password_hasher.dummy_verify()
            password_ok = False
        else:
            password_ok = self.password_hasher.verify(password, user.hashed_password)

        if not password_ok:
            result = self.login_attempts.record_failed_attempt(identifier)
            logger.warning(
                "Invalid credentials",
                email=mask_email(identifier),
                attempts_left=result.attempts_left,
            )
            if result.is_locked:
                raise LockedOutError(result.remaining_minutes)
            raise InvalidCredentialsError(attempts_left=result.attempts_left)

        self.login_attempts.clear_attempts(identifier)

        if not user.email_verified:
            raise EmailNotVerifiedError(email=user.email)
        if not user.is_active:
            logger.warning("Authentication attempt for inactive user", user_id=user.id)
            raise InactiveAccountError()

        user.last_login_at = utcnow()
        user = await self.user_repository.save(user)
        token = self.token_service.create_access_token(user)
        logger.info("User authenticated", user_id=user.id)
        return AuthenticatedSession(user=user, access_token=token)