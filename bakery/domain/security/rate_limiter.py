"""General per-address request limiter.

Windows are fixed, so a client can burst up to twice the limit
across a window boundary.
"""

from typing import Optional

from bakery.domain.security.record_store import Clock, ExpiringRecordStore, WindowedRecord
from bakery.domain.value_objects.security_decisions import RateLimitDecision, minutes_until


class GeneralRateLimiter:
    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        clock: Optional[Clock] = None,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._store: ExpiringRecordStore[WindowedRecord] = ExpiringRecordStore(clock)

    def can_request(self, address: str) -> RateLimitDecision:
        """Count one request from ``address`` and report the remaining quota."""
        with self._store.locked() as records:
            now = self._store.now()
            record = records.get(address)
            if record is None:
                record = WindowedRecord(key=address, count=0, window_start=now)
                records[address] = record
            elif now - record.window_start > self.window_seconds:
                record.count = 0
                record.window_start = now

            if record.count >= self.max_requests:
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining_minutes=minutes_until(record.window_start + self.window_seconds, now),
                )

            record.count += 1
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - record.count,
            )

    def cleanup(self) -> int:
        return self._store.purge(lambda record, now: now - record.window_start > self.window_seconds)

    def __len__(self) -> int:
        return len(self._store)
