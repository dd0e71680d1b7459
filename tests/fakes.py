"""In-memory doubles for the collaborators the services depend on."""

import time
from typing import Dict, List, Optional

from bakery.core.exceptions import DuplicateUserError, EmailServiceError
from bakery.domain.entities.user import User
from bakery.domain.interfaces.repositories import IUserRepository
from bakery.domain.interfaces.services import IEmailService

STRONG_PASSWORD = "Str0ng!Pass"


class FakeClock:
    """Manually advanced epoch-seconds clock."""

    def __init__(self, start: Optional[float] = None):
        self.now = time.time() if start is None else start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUserRepository(IUserRepository):
    """Dict-backed user store with the same uniqueness rules as the SQL one."""

    def __init__(self):
        self.users: Dict[int, User] = {}
        self._next_id = 1

    def add(self, user: User) -> User:
        if user.id is None:
            user.id = self._next_id
            self._next_id += 1
        user.email = user.email.strip().lower()
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        normalized = email.strip().lower()
        return next((u for u in self.users.values() if u.email == normalized), None)

    async def get_by_google_id(self, google_id: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.google_id == google_id), None)

    async def save(self, user: User) -> User:
        existing = await self.get_by_email(user.email)
        if existing is not None and existing.id != user.id:
            raise DuplicateUserError()
        return self.add(user)


class FakeEmailService(IEmailService):
    """Records outgoing mail; ``fail`` makes every send raise."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def _record(self, kind: str, email: str, first_name: str, code: str) -> str:
        if self.fail:
            raise EmailServiceError("Email provider unreachable")
        self.sent.append({"kind": kind, "email": email, "first_name": first_name, "code": code})
        return f"fake-{len(self.sent)}"

    async def send_verification_email(self, email: str, first_name: str, code: str) -> str:
        return await self._record("verification", email, first_name, code)

    async def send_password_reset_email(self, email: str, first_name: str, code: str) -> str:
        return await self._record("password_reset", email, first_name, code)

    def last_code(self, kind: str) -> str:
        return [m for m in self.sent if m["kind"] == kind][-1]["code"]


