from structlog import get_logger

from bakery.core.exceptions import InactiveAccountError
from bakery.core.logging import mask_email
from bakery.domain.entities.user import Role, User, utcnow
from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.services.auth.token import TokenService
from bakery.domain.services.authentication.user_authentication_service import AuthenticatedSession
from bakery.domain.value_objects.oauth_profile import GoogleProfile

logger = get_logger(__name__)


class OAuthService:
    """Signs in Google users, linking or creating the local account.

    Resolution order for a verified Google profile:

    1. An account already linked to the Google id.
    2. An account with the same email, which gets linked and marked verified
       because Google has verified the address.
    3. Otherwise a new, verified customer without a password.

    Attributes:
        user_repository (IUserRepository): User persistence.
        token_service (TokenService): Issues the session token.
    """

    def __init__(self, user_repository: IUserRepository, token_service: TokenService):
        self.user_repository = user_repository
        self.token_service = token_service

    async def authenticate_with_google(self, profile: GoogleProfile) -> AuthenticatedSession:
        """Resolve ``profile`` to a local user and issue a token.

        Raises:
            InactiveAccountError: If the resolved account has been deactivated.
        """
        user = await self.user_repository.get_by_google_id(profile.google_id)
        if user is None:
            user = await self.user_repository.get_by_email(profile.email)
            if user is not None:
                user.google_id = profile.google_id
                user.email_verified = True
                logger.info("Google account linked", user_id=user.id, email=mask_email(user.email))
            else:
                user = User(
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    email=profile.email,
                    role=Role.CUSTOMER.value,
                    google_id=profile.google_id,
                    email_verified=True,
                )
                logger.info("User registered with Google", email=mask_email(profile.email))

        if not user.is_active:
            raise InactiveAccountError()

        user.last_login_at = utcnow()
        user = await self.user_repository.save(user)
        return AuthenticatedSession(user=user, access_token=self.token_service.create_access_token(user))
