"""Periodic expired-session sweep.

An explicit asyncio task owned by the application lifespan: ``start()`` on
startup, ``stop()`` on shutdown. Each cycle sleeps ``interval`` and then runs
one sweep. A failing cycle is logged and the loop keeps going.

Usage:
    job = SessionCleanupJob(
        cleanup=manager.cleanup_expired_sessions,
        interval=timedelta(hours=1),
        logger=logger,
    )
    await job.start()
    ...
    await job.stop()
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import timedelta

from src.domain.protocols.logger_protocol import LoggerProtocol


class SessionCleanupJob:
    """Background loop calling ``cleanup`` every ``interval``.

    Attributes:
        runs: Completed sweeps (successful or not) since start.
        last_deleted: Rows removed by the most recent successful sweep.
        last_users_over_cap: Users above the concurrency cap after that sweep.
    """

    def __init__(
        self,
        *,
        cleanup: Callable[[], Awaitable[int]],
        interval: timedelta,
        logger: LoggerProtocol,
        users_over_cap: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the job.

        Args:
            cleanup: Sweep coroutine returning the number of rows removed.
            interval: Delay before each sweep.
            logger: Structured logger.
            users_over_cap: Reads the over-cap user count left by ``cleanup``.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        self._cleanup = cleanup
        self._interval = interval.total_seconds()
        self._logger = logger.bind(component="session_cleanup")
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self.runs = 0
        self.last_deleted = 0
        self.last_users_over_cap = 0
        self._users_over_cap = users_over_cap

    @property
    def is_running(self) -> bool:
        return self._running and self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Spawn the background task (no-op when already running)."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="session-cleanup")
        self._logger.info("session_cleanup_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Cancel the background task and wait for it to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._logger.info("session_cleanup_stopped", runs=self.runs)

    async def run_once(self) -> int:
        """Run one sweep now.

        Returns:
            Rows removed by this sweep.
        """
        deleted = await self._cleanup()
        self.runs += 1
        self.last_deleted = deleted
        if self._users_over_cap is not None:
            self.last_users_over_cap = self._users_over_cap()
        return deleted

    async def _loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval)
            if not self._running:
                break
            try:
                await self.run_once()
            except Exception as e:
                self.runs += 1
                self._logger.error("session_cleanup_cycle_failed", error=e)
