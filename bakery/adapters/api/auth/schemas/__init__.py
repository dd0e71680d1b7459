from .requests import (
    EmailOnlyRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from .responses import AuthResponse, MessageResponse, ProfileResponse, RegisterResponse, UserOut

__all__ = [
    "AuthResponse",
    "EmailOnlyRequest",
    "LoginRequest",
    "MessageResponse",
    "ProfileResponse",
    "RegisterRequest",
    "RegisterResponse",
    "ResetPasswordRequest",
    "UserOut",
    "VerifyEmailRequest",
]
