from __future__ import annotations

"""Centralized, structured exception hierarchy for the bakery backend.

Each exception carries a machine-readable `code` for programmatic error
handling and a human-readable `message` for logging and user feedback.

The hierarchy is designed to:
- Provide clear, specific errors for different failure scenarios.
- Map cleanly to HTTP status codes in the API layer (see `core.handlers`).
- Offer a consistent structure for logging and monitoring.

Denials issued by the security trackers are plain result values; these
exceptions only appear once a route decides to turn a denial into a response.
"""

from typing import Final, Optional

__all__: Final = [
    "BakeryError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "EmailNotVerifiedError",
    "TokenError",
    "TokenMalformedError",
    "TokenExpiredError",
    "TokenRevokedError",
    "PermissionError",
    "InactiveAccountError",
    "CSRFError",
    "CSRFMissingError",
    "CSRFInvalidError",
    "RateLimitError",
    "RateLimitExceededError",
    "LockedOutError",
    "ValidationError",
    "PasswordPolicyError",
    "DuplicateUserError",
    "UserNotFoundError",
    "EmailServiceError",
    "OAuthError",
    "DatabaseError",
]


class BakeryError(Exception):
    """Base exception class for all custom errors in the application.

    Attributes:
        message (str): A human-readable error message, suitable for logging.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Auth-related errors (401)
# ---------------------------------------------------------------------------


class AuthenticationError(BakeryError):
    """Raised for general authentication failures. Maps to `401 Unauthorized`."""

    def __init__(self, message: str, code: str = "authentication_error"):
        super().__init__(message, code)


class InvalidCredentialsError(AuthenticationError):
    """Raised when the email/password pair does not match.

    The message is identical for unknown accounts and wrong passwords so the
    response cannot be used to enumerate accounts.
    """

    def __init__(
        self,
        message: str = "Invalid credentials",
        code: str = "invalid_credentials",
        attempts_left: Optional[int] = None,
    ):
        super().__init__(message, code)
        self.attempts_left = attempts_left


class EmailNotVerifiedError(AuthenticationError):
    """Raised when a user with valid credentials has not confirmed their email yet."""

    def __init__(
        self,
        email: str,
        message: str = "Please verify your email address before signing in",
        code: str = "email_not_verified",
    ):
        super().__init__(message, code)
        self.email = email


class TokenError(AuthenticationError):
    """Base class for bearer token failures."""


class TokenMalformedError(TokenError):
    """Raised when a token is missing, unsigned, tampered with or unreadable."""

    def __init__(self, message: str = "Invalid token", code: str = "token_malformed"):
        super().__init__(message, code)


class TokenExpiredError(TokenError):
    """Raised when a token's `exp` claim is in the past."""

    def __init__(self, message: str = "Token expired", code: str = "token_expired"):
        super().__init__(message, code)


class TokenRevokedError(TokenError):
    """Raised when a well-formed token has been blacklisted by a logout."""

    def __init__(
        self,
        message: str = "Session expired. Please sign in again.",
        code: str = "token_revoked",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Authorization and CSRF errors (403)
# ---------------------------------------------------------------------------


class PermissionError(BakeryError):
    """Raised when an authenticated caller may not perform an action. Maps to `403`."""

    def __init__(self, message: str, code: str = "permission_denied"):
        super().__init__(message, code)


class InactiveAccountError(PermissionError):
    """Raised when a deactivated account tries to sign in."""

    def __init__(
        self,
        message: str = "Inactive account. Please contact an administrator.",
        code: str = "inactive_account",
    ):
        super().__init__(message, code)


class CSRFError(PermissionError):
    """Base class for CSRF verification failures. Maps to `403 Forbidden`."""


class CSRFMissingError(CSRFError):
    def __init__(self, message: str = "CSRF token missing", code: str = "csrf_missing"):
        super().__init__(message, code)


class CSRFInvalidError(CSRFError):
    def __init__(self, message: str = "Invalid or expired CSRF token", code: str = "csrf_invalid"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Throttling errors (429)
# ---------------------------------------------------------------------------


class RateLimitError(BakeryError):
    """Base class for rate limiting related errors.

    Every throttling error carries the number of whole minutes the caller has
    to wait, so the response can always tell the user when to retry.
    """

    def __init__(self, message: str, retry_after_minutes: int, code: str = "rate_limit_exceeded"):
        super().__init__(message, code)
        self.retry_after_minutes = retry_after_minutes


class RateLimitExceededError(RateLimitError):
    """Raised when a request quota (per address or per account) is exhausted."""

    def __init__(self, retry_after_minutes: int, message: Optional[str] = None, code: str = "rate_limit_exceeded"):
        if message is None:
            message = f"Too many requests. Try again in {retry_after_minutes} minutes."
        super().__init__(message, retry_after_minutes, code)


class LockedOutError(RateLimitError):
    """Raised while an account is locked after repeated failed logins."""

    def __init__(self, retry_after_minutes: int, message: Optional[str] = None, code: str = "account_locked"):
        if message is None:
            message = (
                "Account temporarily locked after too many failed attempts. "
                f"Try again in {retry_after_minutes} minutes."
            )
        super().__init__(message, retry_after_minutes, code)


# ---------------------------------------------------------------------------
# Validation errors (400) and lookups (404)
# ---------------------------------------------------------------------------


class ValidationError(BakeryError):
    """Raised for general data validation failures. Maps to `400 Bad Request`."""

    def __init__(self, message: str, code: str = "validation_error", errors: Optional[list] = None):
        super().__init__(message, code)
        self.errors = errors or []


class PasswordPolicyError(ValidationError):
    """Raised when a password does not meet the strength policy."""

    def __init__(self, message: str, code: str = "password_policy_error"):
        super().__init__(message, code)


class DuplicateUserError(ValidationError):
    """Raised when registering an email that already has an account."""

    def __init__(self, message: str = "Email is already registered", code: str = "duplicate_user"):
        super().__init__(message, code)


class UserNotFoundError(BakeryError):
    """Raised when a requested user is not found. Maps to `404 Not Found`."""

    def __init__(self, message: str = "User not found", code: str = "user_not_found"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------


class EmailServiceError(BakeryError):
    """Raised when the email provider rejects or cannot receive a message.

    Callers treat it as non-fatal: the failure is logged and the request
    still succeeds. Maps to `503` only if it escapes a route.
    """

    def __init__(self, message: str, code: str = "email_service_error"):
        super().__init__(message, code)


class OAuthError(AuthenticationError):
    """Raised when the external identity provider exchange fails."""

    def __init__(self, message: str = "Google authentication failed", code: str = "oauth_error"):
        super().__init__(message, code)


class DatabaseError(BakeryError):
    """Raised for low-level database interaction errors. Maps to `500`."""

    def __init__(self, message: str, code: str = "database_error"):
        super().__init__(message, code)
