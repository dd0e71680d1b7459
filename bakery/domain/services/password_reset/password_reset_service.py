"""Password recovery with mailed six-digit codes.

Both steps are deliberately vague towards the caller. Requesting a code
answers the same way whether or not the email has an account, and a bad
code is reported identically to an unknown email.
"""

from datetime import timedelta
from typing import Any, Callable, Optional

import structlog

from bakery.core.config.settings import settings
from bakery.core.exceptions import (
    EmailServiceError,
    PasswordPolicyError,
    RateLimitExceededError,
    ValidationError,
)
from bakery.core.logging import mask_email
from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.interfaces.services import IEmailService, IPasswordHasher
from bakery.domain.security.password_reset_requests import PasswordResetRequestTracker
from bakery.domain.validation.input_sanitizer import password_requirements_message
from bakery.domain.value_objects.one_time_code import OneTimeCode, code_matches

logger = structlog.get_logger(__name__)

INVALID_CODE_MESSAGE = "Invalid or expired code"

DeferDelivery = Callable[..., Any]


class PasswordResetService:
    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        email_service: IEmailService,
        reset_requests: PasswordResetRequestTracker,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.email_service = email_service
        self.reset_requests = reset_requests

    async def request_password_reset(self, email: str, defer: Optional[DeferDelivery] = None) -> Optional[str]:
        """Mail a recovery code if the account exists.

        The request is counted against the per-identifier quota before the
        account is looked up, so probing unknown emails is throttled too.

        Args:
            email: Address the code is requested for.
            defer: Scheduler such as ``BackgroundTasks.add_task``. When given,
                delivery runs after the response is sent, so known and unknown
                emails answer equally fast. Otherwise it is awaited inline.

        Returns:
            The generated code when an account exists, else ``None``. Routes
            only expose it in development.

        Raises:
            RateLimitExceededError: If the identifier used up its quota.
        """
        identifier = email.strip().lower()
        decision = self.reset_requests.can_request(identifier)
        if not decision.allowed:
            raise RateLimitExceededError(
                decision.remaining_minutes,
                message=(
                    "Too many password reset requests. "
                    f"Try again in {decision.remaining_minutes} minutes."
                ),
            )

        user = await self.user_repository.get_by_email(identifier)
        if user is None:
            logger.info("Password reset requested for unknown email", email=mask_email(identifier))
            return None

        code = OneTimeCode.generate(timedelta(minutes=settings.RECOVERY_CODE_TTL_MINUTES))
        user.recovery_code = code.value
        user.recovery_code_expires_at = code.expires_at
        user = await self.user_repository.save(user)

        logger.info("Password reset code issued", user_id=user.id)
        if defer is not None:
            defer(self.deliver_recovery_code, user.id, user.email, user.first_name, code.value)
        else:
            await self.deliver_recovery_code(user.id, user.email, user.first_name, code.value)
        return code.value

    async def deliver_recovery_code(self, user_id: Optional[int], email: str, first_name: str, code: str) -> None:
        try:
            await self.email_service.send_password_reset_email(email, first_name, code)
        except EmailServiceError as e:
            logger.error("Password reset email failed", user_id=user_id, error=e.message)

    async def reset_password(self, email: str, code: str, new_password: str) -> None:
        """Replace the password if ``code`` is the live recovery code.

        Raises:
            ValidationError: If the email is unknown or the code is wrong or expired.
            PasswordPolicyError: If the new password is too weak.
        """
        user = await self.user_repository.get_by_email(email)
        if user is None or not code_matches(user.recovery_code, user.recovery_code_expires_at, code):
            logger.warning("Invalid password reset attempt", email=mask_email(email.strip().lower()))
            raise ValidationError(INVALID_CODE_MESSAGE, code="invalid_code")

        requirements = password_requirements_message(new_password)
        if requirements:
            raise PasswordPolicyError(requirements)

        user.hashed_password = self.password_hasher.hash(new_password)
        user.recovery_code = None
        user.recovery_code_expires_at = None
        await self.user_repository.save(user)
        logger.info("Password reset completed", user_id=user.id)
