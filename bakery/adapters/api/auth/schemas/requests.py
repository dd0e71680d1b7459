from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints.

Fields are accepted both in snake_case and in the camelCase the storefront
sends.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(_Request):
    """Payload expected by ``POST /api/auth/register``."""

    first_name: str = Field(..., examples=["María"])
    last_name: str = Field(..., examples=["Gómez"])
    email: EmailStr = Field(..., examples=["maria@example.com"])
    phone: str = Field(..., examples=["3001234567"])
    password: str = Field(..., examples=["Str0ngP@ss"])


class LoginRequest(_Request):
    """Payload expected by ``POST /api/auth/login``."""

    email: EmailStr = Field(..., examples=["maria@example.com"])
    password: str = Field(..., min_length=1, examples=["Str0ngP@ss"])


class VerifyEmailRequest(_Request):
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12, examples=["123456"])


class EmailOnlyRequest(_Request):
    """Payload for endpoints that only need an address (resend, reset request)."""

    email: EmailStr


class ResetPasswordRequest(_Request):
    """Payload expected by ``POST /api/auth/reset-password``."""

    email: EmailStr
    code: str = Field(..., min_length=1, max_length=12, examples=["123456"])
    new_password: str = Field(..., examples=["N3wStr0ng!"])
