"""Dependencies for the authentication routes.

Each factory builds one collaborator for FastAPI's dependency injection, so
tests can swap any of them through ``app.dependency_overrides``. The
security trackers are not built here: they live on ``app.state.security``
for the lifetime of the process and are only looked up.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.interfaces.services import IEmailService, IPasswordHasher
from bakery.domain.security.trackers import SecurityTrackers
from bakery.domain.services.auth.token import TokenService
from bakery.domain.services.authentication.oauth_service import OAuthService
from bakery.domain.services.authentication.user_authentication_service import (
    UserAuthenticationService,
)
from bakery.domain.services.authentication.user_logout_service import UserLogoutService
from bakery.domain.services.authentication.user_registration_service import (
    UserRegistrationService,
)
from bakery.domain.services.password_reset.password_reset_service import PasswordResetService
from bakery.infrastructure.database import get_db_session
from bakery.infrastructure.repositories.user_repository import UserRepository
from bakery.infrastructure.services.authentication.google_oauth import GoogleOAuthClient
from bakery.infrastructure.services.authentication.password_hasher import BcryptPasswordHasher
from bakery.infrastructure.services.email.email_service import BrevoEmailService

# ---------------------------------------------------------------------------
# Type aliases for dependency injection
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_db_session)]

# ---------------------------------------------------------------------------
# Infrastructure Layer Dependencies
# ---------------------------------------------------------------------------


def get_security_trackers(request: Request) -> SecurityTrackers:
    """Return the process-wide trackers attached at application start."""
    return request.app.state.security


def get_user_repository(db: AsyncDB) -> IUserRepository:
    return UserRepository(db)


@lru_cache(maxsize=1)
def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher()


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    return TokenService()


def get_email_service() -> IEmailService:
    return BrevoEmailService()


@lru_cache(maxsize=1)
def get_google_oauth_client() -> GoogleOAuthClient:
    return GoogleOAuthClient()


Trackers = Annotated[SecurityTrackers, Depends(get_security_trackers)]
UserRepositoryDep = Annotated[IUserRepository, Depends(get_user_repository)]
PasswordHasherDep = Annotated[IPasswordHasher, Depends(get_password_hasher)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
EmailServiceDep = Annotated[IEmailService, Depends(get_email_service)]

# ---------------------------------------------------------------------------
# Domain Service Dependencies
# ---------------------------------------------------------------------------


def get_user_authentication_service(
    trackers: Trackers,
    user_repository: UserRepositoryDep,
    password_hasher: PasswordHasherDep,
    token_service: TokenServiceDep,
) -> UserAuthenticationService:
    return UserAuthenticationService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_service=token_service,
        login_attempts=trackers.login_attempts,
    )


def get_user_registration_service(
    user_repository: UserRepositoryDep,
    password_hasher: PasswordHasherDep,
    email_service: EmailServiceDep,
) -> UserRegistrationService:
    return UserRegistrationService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        email_service=email_service,
    )


def get_password_reset_service(
    trackers: Trackers,
    user_repository: UserRepositoryDep,
    password_hasher: PasswordHasherDep,
    email_service: EmailServiceDep,
) -> PasswordResetService:
    return PasswordResetService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        email_service=email_service,
        reset_requests=trackers.password_resets,
    )


def get_user_logout_service(trackers: Trackers) -> UserLogoutService:
    return UserLogoutService(token_blacklist=trackers.token_blacklist, csrf_tokens=trackers.csrf_tokens)


def get_oauth_service(user_repository: UserRepositoryDep, token_service: TokenServiceDep) -> OAuthService:
    return OAuthService(user_repository=user_repository, token_service=token_service)
