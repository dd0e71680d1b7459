"""
Email delivery settings for the Brevo transactional API.
"""
from pydantic import SecretStr
from pydantic_settings import BaseSettings


class EmailSettings(BaseSettings):
    """
    Settings for outgoing transactional email.

    When ``EMAIL_TEST_MODE`` is on, messages are logged instead of sent; it is
    switched on automatically for the development and test environments.
    """
    BREVO_API_KEY: SecretStr = SecretStr("")
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    BREVO_SENDER_EMAIL: str = "no-reply@pier-reposteria.com"
    BREVO_SENDER_NAME: str = "Pier Repostería"
    EMAIL_TIMEOUT_SECONDS: float = 10.0
    EMAIL_TEST_MODE: bool = False
    EMAIL_TEMPLATE_DIR: str = ""

    def email_delivery_configured(self) -> bool:
        return bool(self.BREVO_API_KEY.get_secret_value() and self.BREVO_SENDER_EMAIL)
