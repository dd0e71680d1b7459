from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from structlog import get_logger

from bakery.adapters.api.auth.schemas import RegisterRequest, RegisterResponse, UserOut
from bakery.core.config.settings import settings
from bakery.domain.services.authentication.user_registration_service import UserRegistrationService
from bakery.infrastructure.dependency_injection.auth_dependencies import get_user_registration_service

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=RegisterResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new customer",
    responses={400: {"description": "Invalid fields, weak password or email already registered"}},
)
async def register_user(
    payload: RegisterRequest,
    registration_service: Annotated[UserRegistrationService, Depends(get_user_registration_service)],
) -> RegisterResponse:
    """Create an unverified customer account and mail a verification code.

    The code is included in the response only in development so the flow can
    be completed without a mailbox.
    """
    result = await registration_service.register(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=str(payload.email),
        phone=payload.phone,
        password=payload.password,
    )
    message = "Registration successful. Check your email for the verification code."
    if not result.email_sent:
        message = "Registration successful, but the verification email could not be sent. Request a new code."
    return RegisterResponse(
        message=message,
        user=UserOut.from_entity(result.user),
        verification_code=result.verification_code if settings.is_development else None,
    )
