"""
Application-specific settings.
"""
from typing import List, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines application-wide settings like project name, environment and CORS origins.

    Security Note:
        - ALLOWED_ORIGINS must list only the trusted storefront domains in
          production; credentials are allowed on CORS requests.
        - TRUST_PROXY_HEADERS should only be enabled when the service runs
          behind a reverse proxy that overwrites X-Forwarded-For, otherwise
          clients can spoof the address used by the rate limiter.
    """
    PROJECT_NAME: str = "pier-reposteria"
    VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5000

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    ALLOWED_ORIGINS: Union[str, List[str]] = Field(
        default="https://pier-reposteria.vercel.app,http://localhost:3000,http://localhost:5173"
    )
    FRONTEND_URL: str = "http://localhost:5173"
    SESSION_SECRET_KEY: SecretStr = SecretStr("change-me-session-secret")
    TRUST_PROXY_HEADERS: bool = False

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of origins into a list.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"
