from datetime import datetime, timezone  # For timestamp fields
from enum import Enum  # For type-safe role enumeration
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel, String


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Role(str, Enum):
    """Staff and customer roles of the shop.

    Attributes:
        CUSTOMER: Default role for self-registered and Google accounts.
        EMPLOYEE: Shop staff.
        MANAGER: Store manager.
        GENERAL_DIRECTOR: Owner-level access.
    """

    CUSTOMER = "customer"
    EMPLOYEE = "employee"
    MANAGER = "manager"
    GENERAL_DIRECTOR = "general_director"


class User(SQLModel, table=True):
    """A shop account, authenticated by password, Google, or both.

    Attributes:
        id: Primary key.
        first_name / last_name: Display names.
        email: Lower-cased, unique login identifier.
        hashed_password: Bcrypt hash. Null for Google-only accounts.
        phone: Ten-digit contact number.
        role: One of ``Role``; self-registration always yields a customer.
        is_active: Inactive accounts cannot sign in.
        email_verified: Set once the verification code is confirmed or Google
            vouches for the address.
        verification_code / verification_code_expires_at: Six-digit code
            mailed at registration.
        recovery_code / recovery_code_expires_at: Six-digit code mailed for a
            password reset.
        google_id: Subject identifier from Google.
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(
        sa_column=Column(String, unique=True, index=True, nullable=False),
    )
    hashed_password: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=10)
    role: str = Field(
        default=Role.CUSTOMER.value,
        sa_column=Column(String(32), nullable=False, default=Role.CUSTOMER.value),
    )
    is_active: bool = Field(default=True)
    email_verified: bool = Field(default=False)
    verification_code: Optional[str] = Field(default=None, max_length=6)
    verification_code_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    recovery_code: Optional[str] = Field(default=None, max_length=6)
    recovery_code_expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    google_id: Optional[str] = Field(
        default=None, sa_column=Column(String, unique=True, index=True, nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(DateTime, nullable=False, default=utcnow)
    )
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime, nullable=True))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_public_dict(self) -> Dict[str, Any]:
        """Representation safe to return to clients: no hash, no codes."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "is_active": self.is_active,
            "email_verified": self.email_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login_at": self.last_login_at.isoformat() if self.last_login_at else None,
        }
