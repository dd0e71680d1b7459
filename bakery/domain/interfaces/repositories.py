"""Repository interfaces for abstracting data persistence in the domain layer.

The domain services depend on these abstract ports; the SQL implementation
lives in ``bakery.infrastructure.repositories`` and tests supply in-memory
doubles.
"""

from abc import ABC, abstractmethod
from typing import Optional

from bakery.domain.entities.user import User


class IUserRepository(ABC):
    """Contract for user persistence keyed by normalized email."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Retrieves a user by email address (case-insensitively).

        Returns:
            An optional `User` entity. Returns `None` if no user is found.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def save(self, user: User) -> User:
        """Inserts a new user or persists changes to an existing one.

        Raises:
            DuplicateUserError: If the email is already taken by another account.
        """
        raise NotImplementedError
