"""Failed-login lockout tracker."""

from typing import Optional

import structlog

from bakery.domain.security.record_store import Clock, ExpiringRecordStore, WindowedRecord
from bakery.domain.value_objects.security_decisions import (
    FailedAttemptResult,
    LockStatus,
    minutes_until,
)

logger = structlog.get_logger(__name__)


def normalize_identifier(identifier: str) -> str:
    return identifier.strip().lower()


class LoginAttemptTracker:
    """Counts failed logins per account and locks the account past a threshold.

    A record opens on the first failure. Failures inside the attempt window
    increment it; a failure after the window has elapsed starts a fresh
    window at one. When the count reaches ``max_attempts`` the account is
    locked for ``lockout_seconds``. Locks lift on their own: the first
    ``is_locked`` call after expiry deletes the record.

    Args:
        max_attempts: Failures allowed before the account locks.
        window_seconds: Length of the counting window.
        lockout_seconds: How long a lock lasts.
        retention_seconds: Age after which ``cleanup`` discards a record.
        clock: Returns the current time in epoch seconds.
    """

    def __init__(
        self,
        max_attempts: int = 5,
        window_seconds: float = 15 * 60,
        lockout_seconds: float = 15 * 60,
        retention_seconds: float = 60 * 60,
        clock: Optional[Clock] = None,
    ) -> None:
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.lockout_seconds = lockout_seconds
        self.retention_seconds = retention_seconds
        self._store: ExpiringRecordStore[WindowedRecord] = ExpiringRecordStore(clock)

    def record_failed_attempt(self, identifier: str) -> FailedAttemptResult:
        key = normalize_identifier(identifier)
        with self._store.locked() as records:
            now = self._store.now()
            record = records.get(key)
            if record is None or now - record.window_start > self.window_seconds:
                record = WindowedRecord(key=key, count=1, window_start=now)
                records[key] = record
            else:
                record.count += 1

            if record.count >= self.max_attempts:
                record.locked_until = now + self.lockout_seconds
                logger.warning(
                    "account_locked",
                    failed_attempts=record.count,
                    lockout_minutes=round(self.lockout_seconds / 60),
                )

            locked = record.locked_until is not None
            return FailedAttemptResult(
                is_locked=locked,
                attempts_left=max(0, self.max_attempts - record.count),
                locked_until=record.locked_until,
                remaining_minutes=minutes_until(record.locked_until, now) if locked else None,
            )

    def is_locked(self, identifier: str) -> LockStatus:
        key = normalize_identifier(identifier)
        with self._store.locked() as records:
            record = records.get(key)
            if record is None or record.locked_until is None:
                return LockStatus(locked=False)
            now = self._store.now()
            if record.locked_until > now:
                return LockStatus(locked=True, remaining_minutes=minutes_until(record.locked_until, now))
            del records[key]
            return LockStatus(locked=False)

    def clear_attempts(self, identifier: str) -> None:
        self._store.delete(normalize_identifier(identifier))

    def cleanup(self) -> int:
        """Drop records whose window opened longer ago than the retention period.

        Lock state is not consulted.
        """
        return self._store.purge(lambda record, now: now - record.window_start > self.retention_seconds)

    def __len__(self) -> int:
        return len(self._store)
