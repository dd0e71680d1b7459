"""Transactional email through the Brevo HTTP API.

Messages are rendered from Jinja2 templates in ``bakery/templates/email``
(or ``EMAIL_TEMPLATE_DIR``). In test mode nothing leaves the process: the
message is rendered and logged, and a synthetic message id is returned.
"""

import uuid
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import structlog
from jinja2 import Environment, FileSystemLoader, TemplateError

from bakery.core.config.settings import settings
from bakery.core.exceptions import EmailServiceError
from bakery.core.logging import mask_email
from bakery.domain.interfaces.services import IEmailService

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parents[3] / "templates" / "email"


class BrevoEmailService(IEmailService):
    """Sends verification and recovery codes with Brevo's SMTP endpoint.

    Args:
        client: Optional shared ``httpx.AsyncClient``. When omitted a client
            is opened per message.
        test_mode: Log instead of sending. Defaults to ``EMAIL_TEST_MODE``.
        template_dir: Where the Jinja2 templates live.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        test_mode: Optional[bool] = None,
        template_dir: Optional[Path] = None,
    ):
        self._client = client
        self._test_mode = settings.EMAIL_TEST_MODE if test_mode is None else test_mode
        template_dir = template_dir or Path(settings.EMAIL_TEMPLATE_DIR or DEFAULT_TEMPLATE_DIR)
        self._jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    async def send_verification_email(self, email: str, first_name: str, code: str) -> str:
        html_content = self._render_template(
            "verification.html",
            first_name=first_name,
            code=code,
            ttl_hours=settings.VERIFICATION_CODE_TTL_HOURS,
        )
        return await self.send(email, f"Verify your account - {settings.BREVO_SENDER_NAME}", html_content)

    async def send_password_reset_email(self, email: str, first_name: str, code: str) -> str:
        html_content = self._render_template(
            "password_reset.html",
            first_name=first_name,
            code=code,
            ttl_minutes=settings.RECOVERY_CODE_TTL_MINUTES,
        )
        return await self.send(email, f"Reset your password - {settings.BREVO_SENDER_NAME}", html_content)

    async def send(self, to_email: str, subject: str, html_content: str) -> str:
        """Deliver one HTML message and return the provider's message id.

        Raises:
            EmailServiceError: If the API cannot be reached or rejects the message.
        """
        if self._test_mode:
            message_id = f"test-{uuid.uuid4()}"
            logger.info(
                "Email (test mode)",
                to_email=mask_email(to_email),
                subject=subject,
                message_id=message_id,
                html_content_length=len(html_content),
            )
            return message_id

        payload = self._build_payload(to_email, subject, html_content)
        headers = {
            "api-key": settings.BREVO_API_KEY.get_secret_value(),
            "accept": "application/json",
            "content-type": "application/json",
        }
        try:
            if self._client is not None:
                response = await self._client.post(settings.BREVO_API_URL, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
                    response = await client.post(settings.BREVO_API_URL, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Email rejected by provider",
                to_email=mask_email(to_email),
                status_code=e.response.status_code,
            )
            raise EmailServiceError(f"Email provider rejected the message ({e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.error("Email provider unreachable", to_email=mask_email(to_email), error=str(e))
            raise EmailServiceError("Email provider unreachable") from e

        message_id = response.json().get("messageId", "")
        logger.info("Email sent", to_email=mask_email(to_email), subject=subject, message_id=message_id)
        return message_id

    def _build_payload(self, to_email: str, subject: str, html_content: str) -> Dict[str, Any]:
        return {
            "sender": {"name": settings.BREVO_SENDER_NAME, "email": settings.BREVO_SENDER_EMAIL},
            "to": [{"email": to_email}],
            "subject": subject,
            "htmlContent": html_content,
        }

    def _render_template(self, template_name: str, **context: Any) -> str:
        """Render an email template.

        Raises:
            EmailServiceError: If the template is missing or fails to render.
        """
        context.setdefault("app_name", settings.BREVO_SENDER_NAME)
        context.setdefault("frontend_url", settings.FRONTEND_URL)
        try:
            return self._jinja_env.get_template(template_name).render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed", template=template_name, error=str(e))
            raise EmailServiceError(f"Template rendering failed: {template_name}") from e
