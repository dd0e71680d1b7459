"""User Repository implementation using SQLAlchemy.

Concrete adapter for ``IUserRepository`` on an async session. Emails are
stored lower-cased, so every lookup normalizes its argument the same way.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from bakery.core.exceptions import DuplicateUserError
from bakery.core.logging import mask_email
from bakery.domain.entities.user import User
from bakery.domain.interfaces.repositories import IUserRepository

logger = get_logger(__name__)


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of the user store.

    Args:
        db_session: SQLAlchemy async session, injected per request.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by primary key.

        Raises:
            ValueError: If user_id is not a positive integer.
        """
        if user_id <= 0:
            logger.warning("Invalid user ID provided", user_id=user_id)
            raise ValueError("User ID must be a positive integer")

        result = await self.db_session.execute(select(User).where(User.id == user_id))
        user = result.scalars().first()
        logger.debug("User lookup by ID completed", user_id=user_id, found=user is not None)
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        normalized = email.strip().lower()
        result = await self.db_session.execute(select(User).where(User.email == normalized))
        user = result.scalars().first()
        logger.debug(
            "User lookup by email completed",
            email=mask_email(normalized),
            found=user is not None,
        )
        return user

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        result = await self.db_session.execute(select(User).where(User.google_id == google_id))
        return result.scalars().first()

    async def save(self, user: User) -> User:
        """Save or update user entity with proper transaction management.

        Args:
            user: User entity to save or update.

        Returns:
            The saved user, refreshed from the database.

        Raises:
            DuplicateUserError: If the email or Google id is already taken.
        """
        is_new = user.id is None
        user.email = user.email.strip().lower()
        self.db_session.add(user)
        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning("User save rejected by unique constraint", email=mask_email(user.email), error=str(e.orig))
            raise DuplicateUserError() from e
        await self.db_session.refresh(user)

        logger.info(
            "User saved successfully",
            user_id=user.id,
            email=mask_email(user.email),
            operation="insert" if is_new else "update",
        )
        return user
