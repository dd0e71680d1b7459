from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from bakery.adapters.api.auth.schemas import MessageResponse
from bakery.core.dependencies.auth import TokenContext, get_token_context
from bakery.core.dependencies.client import get_csrf_session_key
from bakery.domain.services.authentication.user_logout_service import UserLogoutService
from bakery.infrastructure.dependency_injection.auth_dependencies import get_user_logout_service

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Log out the current session",
)
async def logout_user(
    request: Request,
    context: Annotated[TokenContext, Depends(get_token_context)],
    logout_service: Annotated[UserLogoutService, Depends(get_user_logout_service)],
) -> MessageResponse:
    """Revoke the bearer token and drop the caller's CSRF token.

    The token stays revoked until its own expiry; presenting it again yields
    401.
    """
    logout_service.logout(context.token, context.claims, csrf_session_key=get_csrf_session_key(request))
    return MessageResponse(message="Logged out successfully")
