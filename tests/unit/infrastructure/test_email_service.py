import json

import httpx
import pytest
from pydantic import SecretStr

from bakery.core.config.settings import settings
from bakery.core.exceptions import EmailServiceError
from bakery.infrastructure.services.email.email_service import BrevoEmailService


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_verification_email_is_posted_to_brevo(monkeypatch):
    monkeypatch.setattr(settings, "BREVO_API_KEY", SecretStr("xkeysib-test"))
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        captured["payload"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "<abc@smtp-relay.brevo.com>"})

    async with _client(handler) as client:
        service = BrevoEmailService(client=client, test_mode=False)
        message_id = await service.send_verification_email("maria@example.com", "María", "123456")

    assert message_id == "<abc@smtp-relay.brevo.com>"
    assert captured["url"] == settings.BREVO_API_URL
    assert captured["headers"]["api-key"] == "xkeysib-test"
    payload = captured["payload"]
    assert payload["to"] == [{"email": "maria@example.com"}]
    assert payload["sender"]["email"] == settings.BREVO_SENDER_EMAIL
    assert "123456" in payload["htmlContent"]
    assert "María" in payload["htmlContent"]


@pytest.mark.asyncio
async def test_password_reset_template_mentions_code_lifetime():
    service = BrevoEmailService(test_mode=True)

    html = service._render_template("password_reset.html", first_name="Ana", code="654321", ttl_minutes=15)

    assert "654321" in html
    assert "15 minutes" in html


@pytest.mark.asyncio
async def test_provider_rejection_raises_email_service_error():
    async with _client(lambda request: httpx.Response(401, json={"message": "Key not found"})) as client:
        service = BrevoEmailService(client=client, test_mode=False)
        with pytest.raises(EmailServiceError) as exc_info:
            await service.send("maria@example.com", "Hola", "<p>Hola</p>")

    assert "401" in exc_info.value.message


@pytest.mark.asyncio
async def test_network_failure_raises_email_service_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        service = BrevoEmailService(client=client, test_mode=False)
        with pytest.raises(EmailServiceError):
            await service.send("maria@example.com", "Hola", "<p>Hola</p>")


@pytest.mark.asyncio
async def test_test_mode_never_calls_the_api():
    def handler(request):
        raise AssertionError("no request expected in test mode")

    async with _client(handler) as client:
        service = BrevoEmailService(client=client, test_mode=True)
        message_id = await service.send_password_reset_email("maria@example.com", "María", "123456")

    assert message_id.startswith("test-")


def test_missing_template_raises_email_service_error():
    with pytest.raises(EmailServiceError):
        BrevoEmailService(test_mode=True)._render_template("missing.html")
