"""Bcrypt password hashing through passlib."""

from typing import Optional

from passlib.context import CryptContext

from bakery.core.config.settings import settings
from bakery.domain.interfaces.services import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """
    Hashes and verifies passwords with bcrypt.

    Verification is constant-time inside bcrypt. ``dummy_verify`` is used on
    the login path when no account matches, so unknown emails take as long
    as wrong passwords.
    """

    def __init__(self, rounds: Optional[int] = None):
        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds or settings.BCRYPT_ROUNDS,
        )

    def hash(self, plaintext: str) -> str:
        return self.pwd_context.hash(plaintext)

    def verify(self, plaintext: str, hashed: Optional[str]) -> bool:
        if not hashed:
            self.pwd_context.dummy_verify()
            return False
        return self.pwd_context.verify(plaintext, hashed)

    def dummy_verify(self) -> None:
        self.pwd_context.dummy_verify()
