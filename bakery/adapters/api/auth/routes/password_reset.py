from __future__ import annotations

"""Password recovery endpoints.

``request-password-reset`` answers identically for known and unknown
emails; the only observable difference is the 429 once the per-email quota
is used up. The recovery mail goes out after the response.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends

from bakery.adapters.api.auth.schemas import EmailOnlyRequest, MessageResponse, ResetPasswordRequest
from bakery.core.config.settings import settings
from bakery.domain.services.password_reset.password_reset_service import PasswordResetService
from bakery.infrastructure.dependency_injection.auth_dependencies import get_password_reset_service

router = APIRouter()

GENERIC_RESET_MESSAGE = "If the email is registered, you will receive a recovery code."

PasswordResetServiceDep = Annotated[PasswordResetService, Depends(get_password_reset_service)]


@router.post(
    "/request-password-reset",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Request a recovery code",
    responses={429: {"description": "Too many requests for this email; retryAfter in minutes"}},
)
async def request_password_reset(
    payload: EmailOnlyRequest,
    background_tasks: BackgroundTasks,
    reset_service: PasswordResetServiceDep,
) -> MessageResponse:
    code = await reset_service.request_password_reset(str(payload.email), defer=background_tasks.add_task)
    return MessageResponse(
        message=GENERIC_RESET_MESSAGE,
        code=code if settings.is_development else None,
    )


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    response_model_exclude_none=True,
    summary="Set a new password with a recovery code",
)
async def reset_password(
    payload: ResetPasswordRequest,
    reset_service: PasswordResetServiceDep,
) -> MessageResponse:
    await reset_service.reset_password(str(payload.email), payload.code, payload.new_password)
    return MessageResponse(message="Password updated successfully")
