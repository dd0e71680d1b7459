"""Time-windowed key to record map shared by every security tracker.

Each tracker owns one store. The store holds a single re-entrant lock which
the tracker takes around its whole read-modify-write, so two concurrent
updates to the same key always observe each other.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Iterator, Optional, TypeVar

Clock = Callable[[], float]

R = TypeVar("R")


@dataclass
class WindowedRecord:
    """Counter state for one key inside a fixed window.

    Attributes:
        key: Normalized identifier or client address.
        count: Events observed in the current window.
        window_start: Epoch seconds when the current window opened.
        locked_until: Epoch seconds until which the key is denied, if any.
    """

    key: str
    count: int
    window_start: float
    locked_until: Optional[float] = None


class ExpiringRecordStore(Generic[R]):
    """In-memory mapping with an injectable clock and predicate-driven purge."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.time
        self._records: Dict[str, R] = {}
        self._lock = threading.RLock()

    def now(self) -> float:
        return self._clock()

    @contextmanager
    def locked(self) -> Iterator[Dict[str, R]]:
        """Hold the store lock and expose the underlying mapping."""
        with self._lock:
            yield self._records

    def get(self, key: str) -> Optional[R]:
        with self._lock:
            return self._records.get(key)

    def put(self, key: str, record: R) -> None:
        with self._lock:
            self._records[key] = record

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._records.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def purge(self, is_expired: Callable[[R, float], bool]) -> int:
        """Remove every record for which ``is_expired(record, now)`` holds.

        Returns:
            int: Number of records removed.
        """
        with self._lock:
            now = self._clock()
            stale = [key for key, record in self._records.items() if is_expired(record, now)]
            for key in stale:
                del self._records[key]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records
