"""Email and password sign-in.

All of the lockout bookkeeping happens in
:class:`~bakery.domain.services.authentication.user_authentication_service.UserAuthenticationService`;
its exceptions become 401, 403 or 429 responses through the global handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from bakery.adapters.api.auth.schemas import AuthResponse, LoginRequest, UserOut
from bakery.domain.services.authentication.user_authentication_service import (
    UserAuthenticationService,
)
from bakery.infrastructure.dependency_injection.auth_dependencies import (
    get_user_authentication_service,
)

router = APIRouter()


@router.post(
    "",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate a user",
    responses={
        401: {"description": "Invalid credentials (with attemptsLeft) or unverified email"},
        403: {"description": "Account is inactive"},
        429: {"description": "Account locked; lockedUntil gives the wait in minutes"},
    },
)
async def login_user(
    payload: LoginRequest,
    auth_service: Annotated[UserAuthenticationService, Depends(get_user_authentication_service)],
) -> AuthResponse:
    session = await auth_service.authenticate(str(payload.email), payload.password)
    return AuthResponse(
        message="Login successful",
        token=session.access_token,
        user=UserOut.from_entity(session.user),
    )
