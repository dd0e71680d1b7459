"""Google sign-in through authlib's Starlette integration."""

from typing import Any, Optional

from authlib.integrations.base_client import OAuthError as AuthlibOAuthError
from authlib.integrations.starlette_client import OAuth
from starlette.requests import Request
from starlette.responses import Response
from structlog import get_logger

from bakery.core.config.settings import settings
from bakery.core.exceptions import OAuthError
from bakery.domain.value_objects.oauth_profile import GoogleProfile

logger = get_logger(__name__)


class GoogleOAuthClient:
    """Runs the authorization-code handshake with Google.

    The OAuth ``state`` value is kept in the Starlette session, so the
    application must install ``SessionMiddleware`` for this client to work.

    Attributes:
        oauth (OAuth): Authlib registry holding the ``google`` client.
    """

    def __init__(self, oauth: Optional[OAuth] = None):
        if oauth is None:
            oauth = OAuth()
            oauth.register(
                name="google",
                client_id=settings.GOOGLE_CLIENT_ID,
                client_secret=settings.GOOGLE_CLIENT_SECRET.get_secret_value(),
                server_metadata_url=settings.GOOGLE_METADATA_URL,
                client_kwargs={"scope": "openid email profile"},
            )
        self.oauth = oauth

    @property
    def configured(self) -> bool:
        return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET.get_secret_value())

    async def authorization_redirect(self, request: Request) -> Response:
        """Redirect the browser to Google's consent screen."""
        if not self.configured:
            raise OAuthError("Google sign-in is not configured")
        redirect_uri = settings.GOOGLE_CALLBACK_URL or str(request.url_for("google_callback"))
        return await self.oauth.google.authorize_redirect(request, redirect_uri)

    async def fetch_profile(self, request: Request) -> GoogleProfile:
        """Exchange the callback's authorization code for the user's profile.

        Raises:
            OAuthError: If the exchange fails or the profile lacks an email.
        """
        try:
            token: Any = await self.oauth.google.authorize_access_token(request)
            userinfo = token.get("userinfo") or await self.oauth.google.userinfo(token=token)
            return GoogleProfile.from_userinfo(dict(userinfo))
        except (AuthlibOAuthError, ValueError) as e:
            logger.warning("Google token exchange failed", error=str(e))
            raise OAuthError() from e
