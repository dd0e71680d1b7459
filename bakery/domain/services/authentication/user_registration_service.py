"""Account registration and email verification."""

from dataclasses import dataclass
from datetime import timedelta

import structlog

from bakery.core.config.settings import settings
from bakery.core.exceptions import (
    DuplicateUserError,
    EmailServiceError,
    PasswordPolicyError,
    UserNotFoundError,
    ValidationError,
)
from bakery.core.logging import mask_email
from bakery.domain.entities.user import Role, User
from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.interfaces.services import IEmailService, IPasswordHasher
from bakery.domain.validation.input_sanitizer import (
    is_valid_name,
    is_valid_phone,
    password_requirements_message,
)
from bakery.domain.value_objects.one_time_code import OneTimeCode, code_matches

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    user: User
    verification_code: str
    email_sent: bool


class UserRegistrationService:
    """Creates customer accounts and confirms their email addresses.

    Every self-registered account is a ``customer``; staff roles are never
    assigned from a public request. Verification mails are best-effort: a
    delivery failure is logged and the account is still created, and the
    user can ask for a new code later.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        email_service: IEmailService,
    ):
        self.user_repository = user_repository
        self.password_hasher = password_hasher
        self.email_service = email_service

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        password: str,
    ) -> RegistrationResult:
        """Validate and create a new unverified customer.

        Raises:
            ValidationError: If a name or the phone number is malformed.
            PasswordPolicyError: If the password is too weak.
            DuplicateUserError: If the email already has an account.
        """
        errors = []
        if not is_valid_name(first_name):
            errors.append("First name must be 2-50 letters")
        if not is_valid_name(last_name):
            errors.append("Last name must be 2-50 letters")
        if not is_valid_phone(phone):
            errors.append("Phone must be exactly 10 digits")
        if errors:
            raise ValidationError("Validation failed", errors=errors)

        requirements = password_requirements_message(password)
        if requirements:
            raise PasswordPolicyError(requirements)

        normalized_email = email.strip().lower()
        if await self.user_repository.get_by_email(normalized_email) is not None:
            logger.info("Registration rejected for existing email", email=mask_email(normalized_email))
            raise DuplicateUserError()

        code = OneTimeCode.generate(timedelta(hours=settings.VERIFICATION_CODE_TTL_HOURS))
        user = User(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=normalized_email,
            phone=phone,
            hashed_password=self.password_hasher.hash(password),
            role=Role.CUSTOMER.value,
            email_verified=False,
            verification_code=code.value,
            verification_code_expires_at=code.expires_at,
        )
        user = await self.user_repository.save(user)
        logger.info("User registered", user_id=user.id, email=mask_email(user.email))

        email_sent = await self._send_verification(user, code.value)
        return RegistrationResult(user=user, verification_code=code.value, email_sent=email_sent)

    async def verify_email(self, email: str, code: str) -> User:
        """Mark the account verified if ``code`` is the live verification code.

        Raises:
            UserNotFoundError: If no account has this email.
            ValidationError: If the account is already verified or the code is wrong or expired.
        """
        user = await self.user_repository.get_by_email(email)
        if user is None:
            raise UserNotFoundError()
        if user.email_verified:
            raise ValidationError("Email is already verified", code="already_verified")
        if not code_matches(user.verification_code, user.verification_code_expires_at, code):
            logger.warning("Invalid verification code", user_id=user.id)
            raise ValidationError("Invalid or expired code", code="invalid_code")

        user.email_verified = True
        user.verification_code = None
        user.verification_code_expires_at = None
        user = await self.user_repository.save(user)
        logger.info("Email verified", user_id=user.id)
        return user

    async def resend_verification(self, email: str) -> RegistrationResult:
        """Issue a fresh verification code and mail it again.

        Raises:
            UserNotFoundError: If no account has this email.
            ValidationError: If the account is already verified.
        """
        user = await self.user_repository.get_by_email(email)
        if user is None:
            raise UserNotFoundError()
        if user.email_verified:
            raise ValidationError("Email is already verified", code="already_verified")

        code = OneTimeCode.generate(timedelta(hours=settings.VERIFICATION_CODE_TTL_HOURS))
        user.verification_code = code.value
        user.verification_code_expires_at = code.expires_at
        user = await self.user_repository.save(user)

        email_sent = await self._send_verification(user, code.value)
        return RegistrationResult(user=user, verification_code=code.value, email_sent=email_sent)

    async def _send_verification(self, user: User, code: str) -> bool:
        try:
            await self.email_service.send_verification_email(user.email, user.first_name, code)
        except EmailServiceError as e:
            logger.error("Verification email failed", user_id=user.id, error=e.message)
            return False
        return True
