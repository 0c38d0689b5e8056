"""Background polling of in-flight video jobs."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from .session import StoryboardSession

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0  # seconds

Resolver = Callable[[str, Any], Awaitable[None]]


class PollScheduler:
    """Periodically resolves every scene with a pending video job.

    The set of scenes to poll is recomputed from the session on every tick,
    so scenes that start or stop animating between ticks are picked up or
    dropped without bookkeeping. The background task only exists while at
    least one scene is pollable.
    """

    def __init__(
        self,
        session: StoryboardSession,
        resolve: Resolver,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Initialize the scheduler.

        Args:
            session: Session to read pending jobs from.
            resolve: Coroutine function called as ``resolve(scene_id, job)``.
            interval: Seconds between ticks.
        """
        self._session = session
        self._resolve = resolve
        self._interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def arm(self) -> None:
        """Start polling if there is something to poll and no task is running."""
        if self.running or not self._session.pollable_scenes():
            return
        logger.debug(f"Arming poll scheduler (every {self._interval}s)")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while self._session.pollable_scenes():
            await asyncio.sleep(self._interval)
            await self.tick()
        logger.debug("No pending video jobs; poll scheduler disarmed")

    async def tick(self) -> int:
        """Poll every pending job once.

        Returns:
            Number of scenes polled.
        """
        if self._session.quota_exceeded:
            return 0

        scenes = self._session.pollable_scenes()
        if not scenes:
            return 0

        logger.debug(f"Polling {len(scenes)} video job(s)")
        results = await asyncio.gather(
            *(self._resolve(scene.id, scene.pending_video_job) for scene in scenes),
            return_exceptions=True,
        )
        for scene, result in zip(scenes, results):
            if isinstance(result, Exception):
                logger.error(f"Unexpected error polling {scene.id}: {result}")
        return len(scenes)

    async def wait(self) -> None:
        """Block until every pending job has been resolved."""
        while self.running:
            await asyncio.shield(self._task)

    async def stop(self) -> None:
        """Cancel the background task, if any."""
        if self._task is None:
            return
        task, self._task = self._task, None
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug("Poll scheduler stopped")
