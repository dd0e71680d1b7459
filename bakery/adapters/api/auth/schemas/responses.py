from __future__ import annotations

"""Response Pydantic models for authentication endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bakery.domain.entities.user import User


class _Response(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserOut(_Response):
    """Public view of a user. Never includes the password hash or codes."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_active: bool
    email_verified: bool
    created_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
            email_verified=user.email_verified,
            created_at=user.created_at,
            last_login_at=user.last_login_at,
        )


class MessageResponse(_Response):
    message: str
    code: Optional[str] = Field(default=None, description="Only returned in development.")


class RegisterResponse(_Response):
    message: str
    user: UserOut
    verification_code: Optional[str] = Field(default=None, description="Only returned in development.")


class AuthResponse(_Response):
    """Returned by every endpoint that signs the user in."""

    message: str
    token: str
    user: UserOut


class ProfileResponse(_Response):
    user: UserOut
