from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from bakery.adapters.api.auth.schemas import AuthResponse, UserOut, VerifyEmailRequest
from bakery.domain.services.authentication.user_registration_service import UserRegistrationService
from bakery.infrastructure.dependency_injection.auth_dependencies import (
    TokenServiceDep,
    get_user_registration_service,
)

router = APIRouter()


@router.post("", response_model=AuthResponse, summary="Confirm an email address")
async def verify_email(
    payload: VerifyEmailRequest,
    token_service: TokenServiceDep,
    registration_service: Annotated[UserRegistrationService, Depends(get_user_registration_service)],
) -> AuthResponse:
    """Mark the account verified and sign the user in."""
    user = await registration_service.verify_email(str(payload.email), payload.code)
    return AuthResponse(
        message="Email verified successfully",
        token=token_service.create_access_token(user),
        user=UserOut.from_entity(user),
    )
