import pytest

from bakery.core.exceptions import InactiveAccountError
from bakery.domain.services.authentication.oauth_service import OAuthService
from bakery.domain.value_objects.oauth_profile import GoogleProfile

PROFILE = GoogleProfile(
    google_id="google-123", email="maria@example.com", given_name="María", family_name="Gómez"
)


@pytest.fixture
def service(user_repository, token_service):
    return OAuthService(user_repository, token_service)


@pytest.mark.asyncio
async def test_new_google_user_becomes_verified_customer(service, user_repository, token_service):
    session = await service.authenticate_with_google(PROFILE)

    user = session.user
    assert user.id is not None
    assert user.google_id == "google-123"
    assert user.email_verified is True
    assert user.role == "customer"
    assert user.hashed_password is None
    assert (user.first_name, user.last_name) == ("María", "Gómez")
    assert token_service.decode_token(session.access_token)["sub"] == str(user.id)
    assert len(user_repository.users) == 1


@pytest.mark.asyncio
async def test_existing_email_account_is_linked_and_verified(service, make_user, user_repository):
    existing = make_user(email_verified=False)

    session = await service.authenticate_with_google(PROFILE)

    assert session.user.id == existing.id
    assert existing.google_id == "google-123"
    assert existing.email_verified is True
    assert len(user_repository.users) == 1


@pytest.mark.asyncio
async def test_linked_account_is_found_by_google_id(service, make_user):
    linked = make_user(email="old-address@example.com", google_id="google-123")

    session = await service.authenticate_with_google(PROFILE)

    assert session.user.id == linked.id
    assert session.user.last_login_at is not None


@pytest.mark.asyncio
async def test_inactive_account_cannot_sign_in_with_google(service, make_user):
    make_user(is_active=False)

    with pytest.raises(InactiveAccountError):
        await service.authenticate_with_google(PROFILE)
