"""
Settings for the in-memory security trackers and hardening middlewares.
"""
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class SecuritySettings(BaseSettings):
    """
    Thresholds, windows and sweep intervals for the security trackers.

    All tracker state lives in process memory and is lost on restart. Running
    several worker processes gives each one its own counters.
    """

    # Failed-login lockout
    LOGIN_MAX_FAILED_ATTEMPTS: int = Field(default=5, ge=1)
    LOGIN_ATTEMPT_WINDOW_MINUTES: int = Field(default=15, ge=1)
    LOGIN_LOCKOUT_MINUTES: int = Field(default=15, ge=1)
    LOGIN_RECORD_RETENTION_MINUTES: int = Field(default=60, ge=1)

    # Password reset requests per account
    PASSWORD_RESET_MAX_REQUESTS: int = Field(default=3, ge=1)
    PASSWORD_RESET_WINDOW_MINUTES: int = Field(default=60, ge=1)

    # General per-address limiter
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = Field(default=100, ge=1)
    RATE_LIMIT_WINDOW_MINUTES: int = Field(default=15, ge=1)

    # CSRF
    CSRF_ENABLED: bool = True
    CSRF_TOKEN_TTL_MINUTES: int = Field(default=60, ge=1)
    CSRF_EXEMPT_PATHS: Union[str, List[str]] = Field(
        default="/api/auth/register,/api/auth/login,/api/auth/google/callback"
    )

    # Background sweeps
    LOGIN_SWEEP_INTERVAL_MINUTES: float = 10
    PASSWORD_RESET_SWEEP_INTERVAL_MINUTES: float = 10
    RATE_LIMIT_SWEEP_INTERVAL_MINUTES: float = 10
    CSRF_SWEEP_INTERVAL_MINUTES: float = 10
    TOKEN_BLACKLIST_SWEEP_INTERVAL_MINUTES: float = 30

    @field_validator("CSRF_EXEMPT_PATHS", mode="before")
    @classmethod
    def split_exempt_paths(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v
