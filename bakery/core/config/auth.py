"""Authentication settings: JWT signing, password hashing and Google OAuth.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """Defines settings for authentication, including Google OAuth and JWT configuration.

    Security Note:
        - JWT_SECRET signs every session token; it must be a random string of at
          least 32 characters and never be committed or logged.
        - The Google client secret is kept as ``SecretStr`` so it is masked in
          reprs and logs.
    """

    # JWT settings
    JWT_SECRET: SecretStr = Field(...)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = Field(default=7, ge=1)

    # Password hashing
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)

    # One-time codes sent by email
    VERIFICATION_CODE_TTL_HOURS: int = 24
    RECOVERY_CODE_TTL_MINUTES: int = 15

    # Google OAuth settings
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: SecretStr = SecretStr("")
    GOOGLE_CALLBACK_URL: str = "http://localhost:5000/api/auth/google/callback"
    GOOGLE_METADATA_URL: str = "https://accounts.google.com/.well-known/openid-configuration"
