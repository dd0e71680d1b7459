"""Service interfaces for the collaborators the domain layer talks to."""

from abc import ABC, abstractmethod


class IEmailService(ABC):
    """Transactional email dispatch.

    Implementations raise ``EmailServiceError`` on transport failure; callers
    log it and carry on because every mail this system sends is best-effort.
    """

    @abstractmethod
    async def send_verification_email(self, email: str, first_name: str, code: str) -> str:
        """Sends the registration verification code and returns a message id."""
        raise NotImplementedError

    @abstractmethod
    async def send_password_reset_email(self, email: str, first_name: str, code: str) -> str:
        """Sends the password recovery code and returns a message id."""
        raise NotImplementedError


class IPasswordHasher(ABC):
    @abstractmethod
    def hash(self, plaintext: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, plaintext: str, hashed: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def dummy_verify(self) -> None:
        """Burns the same time as a real verification when no user exists."""
        raise NotImplementedError
