"""Process-wide container for the security trackers.

One instance is built at application start and attached to ``app.state``;
routes and middlewares receive it through dependency injection instead of
importing module-level singletons.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from bakery.domain.security.csrf import CSRFTokenStore
from bakery.domain.security.login_attempts import LoginAttemptTracker
from bakery.domain.security.password_reset_requests import PasswordResetRequestTracker
from bakery.domain.security.rate_limiter import GeneralRateLimiter
from bakery.domain.security.record_store import Clock
from bakery.domain.security.token_blacklist import TokenBlacklist

if TYPE_CHECKING:
    from bakery.core.config.settings import Settings


@dataclass
class SecurityTrackers:
    login_attempts: LoginAttemptTracker = field(default_factory=LoginAttemptTracker)
    password_resets: PasswordResetRequestTracker = field(default_factory=PasswordResetRequestTracker)
    rate_limiter: GeneralRateLimiter = field(default_factory=GeneralRateLimiter)
    csrf_tokens: CSRFTokenStore = field(default_factory=CSRFTokenStore)
    token_blacklist: TokenBlacklist = field(default_factory=TokenBlacklist)

    @classmethod
    def from_settings(cls, settings: "Settings", clock: Optional[Clock] = None) -> "SecurityTrackers":
        """Build every tracker from configuration, sharing one clock."""
        return cls(
            login_attempts=LoginAttemptTracker(
                max_attempts=settings.LOGIN_MAX_FAILED_ATTEMPTS,
                window_seconds=settings.LOGIN_ATTEMPT_WINDOW_MINUTES * 60,
                lockout_seconds=settings.LOGIN_LOCKOUT_MINUTES * 60,
                retention_seconds=settings.LOGIN_RECORD_RETENTION_MINUTES * 60,
                clock=clock,
            ),
            password_resets=PasswordResetRequestTracker(
                max_requests=settings.PASSWORD_RESET_MAX_REQUESTS,
                window_seconds=settings.PASSWORD_RESET_WINDOW_MINUTES * 60,
                clock=clock,
            ),
            rate_limiter=GeneralRateLimiter(
                max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
                window_seconds=settings.RATE_LIMIT_WINDOW_MINUTES * 60,
                clock=clock,
            ),
            csrf_tokens=CSRFTokenStore(ttl_seconds=settings.CSRF_TOKEN_TTL_MINUTES * 60, clock=clock),
            token_blacklist=TokenBlacklist(clock=clock),
        )
