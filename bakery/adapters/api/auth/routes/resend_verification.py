from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from bakery.adapters.api.auth.schemas import EmailOnlyRequest, MessageResponse
from bakery.core.config.settings import settings
from bakery.domain.services.authentication.user_registration_service import UserRegistrationService
from bakery.infrastructure.dependency_injection.auth_dependencies import get_user_registration_service

router = APIRouter()


@router.post("", response_model=MessageResponse, response_model_exclude_none=True)
async def resend_verification(
    payload: EmailOnlyRequest,
    registration_service: Annotated[UserRegistrationService, Depends(get_user_registration_service)],
) -> MessageResponse:
    result = await registration_service.resend_verification(str(payload.email))
    return MessageResponse(
        message="A new verification code has been sent",
        code=result.verification_code if settings.is_development else None,
    )
