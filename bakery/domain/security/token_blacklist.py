"""Revoked bearer tokens, remembered until their own expiry."""

from typing import Optional, Union

import structlog

from bakery.core.exceptions import TokenMalformedError
from bakery.domain.security.record_store import Clock, ExpiringRecordStore

logger = structlog.get_logger(__name__)


class TokenBlacklist:
    """Maps a token string verbatim to the epoch second it expires at.

    The expiry is read from the token's own ``exp`` claim by the caller; the
    blacklist never computes one. Once the expiry passes the entry is useless
    because signature verification rejects the token anyway.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._store: ExpiringRecordStore[float] = ExpiringRecordStore(clock)

    def add(self, token: str, expires_at: Union[int, float]) -> None:
        """Blacklist ``token`` until ``expires_at``.

        Raises:
            TokenMalformedError: If the token is empty or the expiry is not a number.
        """
        if not token or not isinstance(token, str):
            raise TokenMalformedError("Cannot revoke an empty token")
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise TokenMalformedError("Token expiry must be a numeric timestamp")
        self._store.put(token, float(expires_at))
        logger.info("token_blacklisted", expires_at=expires_at)

    def is_blacklisted(self, token: str) -> bool:
        with self._store.locked() as records:
            expires_at = records.get(token)
            if expires_at is None:
                return False
            if self._store.now() <= expires_at:
                return True
            del records[token]
            return False

    def cleanup(self) -> int:
        return self._store.purge(lambda expires_at, now: now > expires_at)

    def size(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        """Forget every revoked token."""
        self._store.clear()
        logger.info("token_blacklist_cleared")

    def __len__(self) -> int:
        return len(self._store)
