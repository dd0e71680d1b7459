"""CSRF token issuance and verification bound to a session key."""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Optional

from bakery.domain.security.record_store import Clock, ExpiringRecordStore

CSRF_TOKEN_BYTES = 32


def derive_fingerprint(client_address: str, user_agent: str) -> str:
    """Fallback session key: SHA-256 of the client address and user agent.

    This is a heuristic, not a real session binding. Clients behind the same
    proxy with the same browser share a fingerprint.
    """
    return hashlib.sha256(f"{client_address}{user_agent}".encode("utf-8")).hexdigest()


@dataclass
class CSRFTokenRecord:
    token: str
    created_at: float


class CSRFTokenStore:
    """Holds exactly one live token per session key.

    Issuing a new token overwrites the previous one. A failed comparison does
    not consume the token; only expiry or an explicit invalidation removes it.
    """

    def __init__(self, ttl_seconds: float = 60 * 60, clock: Optional[Clock] = None) -> None:
        self.ttl_seconds = ttl_seconds
        self._store: ExpiringRecordStore[CSRFTokenRecord] = ExpiringRecordStore(clock)

    def generate_token(self, session_key: str) -> str:
        token = secrets.token_hex(CSRF_TOKEN_BYTES)
        self._store.put(session_key, CSRFTokenRecord(token=token, created_at=self._store.now()))
        return token

    def verify_token(self, session_key: str, candidate: Optional[str]) -> bool:
        """Constant-time check of ``candidate`` against the live token for ``session_key``."""
        if not candidate:
            return False
        with self._store.locked() as records:
            record = records.get(session_key)
            if record is None:
                return False
            if self._store.now() - record.created_at > self.ttl_seconds:
                del records[session_key]
                return False
            return hmac.compare_digest(record.token.encode("utf-8"), candidate.encode("utf-8"))

    def invalidate_token(self, session_key: str) -> None:
        self._store.delete(session_key)

    def cleanup(self) -> int:
        return self._store.purge(lambda record, now: now - record.created_at > self.ttl_seconds)

    def __len__(self) -> int:
        return len(self._store)
