"""Six-digit codes mailed for email verification and password recovery."""

import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from bakery.domain.entities.user import utcnow

CODE_LENGTH = 6


@dataclass(frozen=True)
class OneTimeCode:
    value: str
    expires_at: datetime

    @classmethod
    def generate(cls, ttl: timedelta, now: Optional[datetime] = None) -> "OneTimeCode":
        value = str(secrets.randbelow(10**CODE_LENGTH)).zfill(CODE_LENGTH)
        return cls(value=value, expires_at=(now or utcnow()) + ttl)


def code_matches(
    stored: Optional[str],
    expires_at: Optional[datetime],
    candidate: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    """True when ``candidate`` equals the stored code and the code is still live."""
    if not stored or not candidate or expires_at is None:
        return False
    if (now or utcnow()) > expires_at:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), candidate.strip().encode("utf-8"))
