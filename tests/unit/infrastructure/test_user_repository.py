import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from bakery.core.exceptions import DuplicateUserError
from bakery.domain.entities.user import User
from bakery.infrastructure.repositories.user_repository import UserRepository


@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    session_factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repository(db_session):
    return UserRepository(db_session)


def _user(email="Maria@Example.com", **overrides):
    fields = dict(first_name="María", last_name="Gómez", email=email, phone="3001234567", hashed_password="hash")
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
async def test_save_assigns_id_and_lowercases_email(repository):
    user = await repository.save(_user())

    assert user.id is not None
    assert user.email == "maria@example.com"
    assert user.role == "customer"
    assert user.created_at is not None


@pytest.mark.asyncio
async def test_lookups(repository):
    saved = await repository.save(_user(google_id="google-1"))

    assert (await repository.get_by_id(saved.id)).id == saved.id
    assert (await repository.get_by_email("  MARIA@example.com ")).id == saved.id
    assert (await repository.get_by_google_id("google-1")).id == saved.id
    assert await repository.get_by_email("ghost@example.com") is None
    assert await repository.get_by_id(saved.id + 100) is None


@pytest.mark.asyncio
async def test_get_by_id_rejects_non_positive_ids(repository):
    with pytest.raises(ValueError):
        await repository.get_by_id(0)


@pytest.mark.asyncio
async def test_duplicate_email_raises_and_session_stays_usable(repository):
    await repository.save(_user())

    with pytest.raises(DuplicateUserError):
        await repository.save(_user(email="maria@example.com"))

    assert await repository.get_by_email("maria@example.com") is not None


@pytest.mark.asyncio
async def test_save_updates_existing_user(repository):
    user = await repository.save(_user())
    user.email_verified = True
    user.verification_code = None

    await repository.save(user)

    reloaded = await repository.get_by_email("maria@example.com")
    assert reloaded.email_verified is True
