"""Google sign-in.

The browser is sent to Google and comes back to the callback, which always
ends in a redirect to the storefront: to the success page carrying the
session token, or to the login page with an error flag.
"""

import json
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from structlog import get_logger

from bakery.adapters.api.auth.schemas import UserOut
from bakery.core.config.settings import settings
from bakery.core.exceptions import BakeryError
from bakery.domain.services.authentication.oauth_service import OAuthService
from bakery.infrastructure.dependency_injection.auth_dependencies import (
    get_google_oauth_client,
    get_oauth_service,
)
from bakery.infrastructure.services.authentication.google_oauth import GoogleOAuthClient

logger = get_logger(__name__)
router = APIRouter()

GoogleClientDep = Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)]


def failure_redirect() -> RedirectResponse:
    return RedirectResponse(f"{settings.FRONTEND_URL}/login?error=google_auth_failed", status_code=302)


@router.get("", summary="Start Google sign-in")
async def google_login(request: Request, google_client: GoogleClientDep):
    return await google_client.authorization_redirect(request)


@router.get("/callback", name="google_callback", summary="Google sign-in callback")
async def google_callback(
    request: Request,
    google_client: GoogleClientDep,
    oauth_service: Annotated[OAuthService, Depends(get_oauth_service)],
) -> RedirectResponse:
    try:
        profile = await google_client.fetch_profile(request)
        session = await oauth_service.authenticate_with_google(profile)
    except BakeryError as e:
        logger.warning("Google sign-in failed", error=e.code)
        return failure_redirect()

    user = UserOut.from_entity(session.user).model_dump(mode="json", by_alias=True)
    query = urlencode({"token": session.access_token, "user": json.dumps(user)})
    return RedirectResponse(f"{settings.FRONTEND_URL}/auth/google/success?{query}", status_code=302)
