"""Periodic background cleanup of expired tracker records."""

import asyncio
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

import structlog

from bakery.domain.security.trackers import SecurityTrackers

if TYPE_CHECKING:
    from bakery.core.config.settings import Settings

logger = structlog.get_logger(__name__)

Sweep = Tuple[str, Callable[[], int], float]


class SecuritySweeper:
    """Runs each tracker's ``cleanup`` on its own interval as an asyncio task.

    ``start`` is idempotent. ``stop`` cancels the tasks and waits for them, so
    it is safe to call from the application shutdown hook.
    """

    def __init__(self, sweeps: List[Sweep]) -> None:
        self._sweeps = sweeps
        self._tasks: List[asyncio.Task] = []

    @classmethod
    def for_trackers(cls, trackers: SecurityTrackers, settings: "Settings") -> "SecuritySweeper":
        return cls(
            [
                ("login_attempts", trackers.login_attempts.cleanup, settings.LOGIN_SWEEP_INTERVAL_MINUTES * 60),
                (
                    "password_resets",
                    trackers.password_resets.cleanup,
                    settings.PASSWORD_RESET_SWEEP_INTERVAL_MINUTES * 60,
                ),
                ("rate_limiter", trackers.rate_limiter.cleanup, settings.RATE_LIMIT_SWEEP_INTERVAL_MINUTES * 60),
                ("csrf_tokens", trackers.csrf_tokens.cleanup, settings.CSRF_SWEEP_INTERVAL_MINUTES * 60),
                (
                    "token_blacklist",
                    trackers.token_blacklist.cleanup,
                    settings.TOKEN_BLACKLIST_SWEEP_INTERVAL_MINUTES * 60,
                ),
            ]
        )

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def start(self) -> None:
        if self.running:
            return
        self._tasks = [
            asyncio.create_task(self._run(name, cleanup, interval), name=f"sweep:{name}")
            for name, cleanup, interval in self._sweeps
        ]
        logger.info("security_sweeper_started", sweeps=len(self._tasks))

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        logger.info("security_sweeper_stopped")

    @staticmethod
    async def _run(name: str, cleanup: Callable[[], int], interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            sweep_once(name, cleanup)


def sweep_once(name: str, cleanup: Callable[[], int]) -> Optional[int]:
    """Run one cleanup pass, logging instead of killing the loop on failure."""
    try:
        removed = cleanup()
    except Exception as exc:
        logger.error("security_sweep_failed", tracker=name, error=str(exc), exc_info=True)
        return None
    if removed:
        logger.debug("security_sweep_completed", tracker=name, removed=removed)
    return removed
