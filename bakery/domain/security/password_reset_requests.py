"""Per-account cap on password-reset requests."""

from typing import Optional

import structlog

from bakery.domain.security.login_attempts import normalize_identifier
from bakery.domain.security.record_store import Clock, ExpiringRecordStore, WindowedRecord
from bakery.domain.value_objects.security_decisions import ResetRequestDecision, minutes_until

logger = structlog.get_logger(__name__)


class PasswordResetRequestTracker:
    """Fixed-window counter allowing ``max_requests`` resets per identifier.

    The tracker does not know whether the account exists. Callers must reply
    identically either way so the endpoint cannot be used to probe accounts.
    """

    def __init__(
        self,
        max_requests: int = 3,
        window_seconds: float = 60 * 60,
        clock: Optional[Clock] = None,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._store: ExpiringRecordStore[WindowedRecord] = ExpiringRecordStore(clock)

    def can_request(self, identifier: str) -> ResetRequestDecision:
        key = normalize_identifier(identifier)
        with self._store.locked() as records:
            now = self._store.now()
            record = records.get(key)
            if record is None:
                record = WindowedRecord(key=key, count=0, window_start=now)
                records[key] = record
            elif now - record.window_start > self.window_seconds:
                record.count = 0
                record.window_start = now

            if record.count >= self.max_requests:
                remaining = minutes_until(record.window_start + self.window_seconds, now)
                logger.warning("password_reset_requests_exhausted", remaining_minutes=remaining)
                return ResetRequestDecision(allowed=False, remaining_minutes=remaining)

            record.count += 1
            return ResetRequestDecision(allowed=True, attempts_left=self.max_requests - record.count)

    def cleanup(self) -> int:
        return self._store.purge(lambda record, now: now - record.window_start > self.window_seconds)

    def __len__(self) -> int:
        return len(self._store)
