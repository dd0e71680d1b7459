"""Result value objects returned by the in-memory security trackers.

Trackers never raise to signal a denial. They hand back one of these frozen
values and the caller decides how to turn a denial into a response.
"""

import math
from dataclasses import dataclass
from typing import Optional


def minutes_until(deadline: float, now: float) -> int:
    """Whole minutes (rounded up, at least one) between ``now`` and ``deadline``."""
    return max(1, math.ceil((deadline - now) / 60))


@dataclass(frozen=True)
class FailedAttemptResult:
    """Outcome of recording one failed login.

    Attributes:
        is_locked: Whether this failure crossed the lockout threshold.
        attempts_left: Failures remaining before the account locks.
        locked_until: Epoch seconds when the lock lifts, if locked.
        remaining_minutes: Whole minutes until the lock lifts, if locked.
    """

    is_locked: bool
    attempts_left: int
    locked_until: Optional[float] = None
    remaining_minutes: Optional[int] = None


@dataclass(frozen=True)
class LockStatus:
    locked: bool
    remaining_minutes: Optional[int] = None


@dataclass(frozen=True)
class ResetRequestDecision:
    """Whether a password-reset email may be sent for an identifier."""

    allowed: bool
    attempts_left: Optional[int] = None
    remaining_minutes: Optional[int] = None


@dataclass(frozen=True)
class RateLimitDecision:
    """Quota decision for one request from a client address.

    ``remaining`` is set on allowed requests and ``remaining_minutes`` on
    denied ones; ``limit`` is always the configured maximum.
    """

    allowed: bool
    limit: int
    remaining: Optional[int] = None
    remaining_minutes: Optional[int] = None
