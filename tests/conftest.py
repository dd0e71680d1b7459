import os

os.environ["APP_ENV"] = "test"
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-at-least-32-characters")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from bakery.core.application import create_application
from bakery.core.config.settings import settings
from bakery.domain.entities.user import Role, User
from bakery.domain.security.trackers import SecurityTrackers
from bakery.domain.services.auth.token import TokenService
from bakery.infrastructure.dependency_injection.auth_dependencies import (
    get_email_service,
    get_password_hasher,
    get_user_repository,
)
from bakery.infrastructure.services.authentication.password_hasher import BcryptPasswordHasher

from fakes import STRONG_PASSWORD, FakeClock, FakeEmailService, FakeUserRepository


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def trackers(clock):
    return SecurityTrackers.from_settings(settings, clock=clock)


@pytest.fixture
def user_repository():
    return FakeUserRepository()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture(scope="session")
def password_hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService()


@pytest.fixture
def make_user(user_repository, password_hasher):
    """Store a user directly, verified and active unless told otherwise."""

    def _make_user(
        email: str = "maria@example.com",
        password: Optional[str] = STRONG_PASSWORD,
        **overrides,
    ) -> User:
        fields = dict(
            first_name="María",
            last_name="Gómez",
            email=email,
            phone="3001234567",
            role=Role.CUSTOMER.value,
            hashed_password=password_hasher.hash(password) if password else None,
            email_verified=True,
            is_active=True,
        )
        fields.update(overrides)
        return user_repository.add(User(**fields))

    return _make_user


@pytest.fixture
def app(trackers, user_repository, email_service, password_hasher):
    application = create_application(trackers=trackers)
    application.dependency_overrides[get_user_repository] = lambda: user_repository
    application.dependency_overrides[get_email_service] = lambda: email_service
    application.dependency_overrides[get_password_hasher] = lambda: password_hasher
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Client without the lifespan, so no database or sweeper is started."""
    return TestClient(app)


@pytest.fixture
def csrf_headers(client):
    token = client.get("/api/csrf-token").json()["csrfToken"]
    return {"X-CSRF-Token": token}
