from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from authlib.integrations.base_client import OAuthError as AuthlibOAuthError

from bakery.core.exceptions import OAuthError
from bakery.infrastructure.services.authentication.google_oauth import GoogleOAuthClient


def _client_with(google):
    return GoogleOAuthClient(oauth=SimpleNamespace(google=google))


@pytest.mark.asyncio
async def test_fetch_profile_reads_userinfo_from_token():
    google = MagicMock()
    google.authorize_access_token = AsyncMock(
        return_value={"userinfo": {"sub": "g-1", "email": "maria@gmail.com", "given_name": "María"}}
    )

    profile = await _client_with(google).fetch_profile(MagicMock())

    assert profile.google_id == "g-1"
    assert profile.email == "maria@gmail.com"


@pytest.mark.asyncio
async def test_fetch_profile_falls_back_to_userinfo_endpoint():
    google = MagicMock()
    google.authorize_access_token = AsyncMock(return_value={"access_token": "t"})
    google.userinfo = AsyncMock(return_value={"sub": "g-2", "email": "ana@gmail.com"})

    profile = await _client_with(google).fetch_profile(MagicMock())

    assert profile.google_id == "g-2"


@pytest.mark.asyncio
async def test_fetch_profile_maps_provider_errors():
    google = MagicMock()
    google.authorize_access_token = AsyncMock(side_effect=AuthlibOAuthError(error="mismatching_state"))

    with pytest.raises(OAuthError):
        await _client_with(google).fetch_profile(MagicMock())


@pytest.mark.asyncio
async def test_fetch_profile_rejects_profile_without_email():
    google = MagicMock()
    google.authorize_access_token = AsyncMock(return_value={"userinfo": {"sub": "g-3"}})

    with pytest.raises(OAuthError):
        await _client_with(google).fetch_profile(MagicMock())


@pytest.mark.asyncio
async def test_authorization_redirect_requires_configuration(monkeypatch):
    from bakery.core.config.settings import settings

    monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")

    with pytest.raises(OAuthError):
        await _client_with(MagicMock()).authorization_redirect(MagicMock())
