"""Entry point wiring a session to the generation controllers."""

import logging
from typing import Optional

from ..config import Config, config as default_config
from ..services.client import GenerationClient, GenerationProvider
from .images import ImageController
from .poller import PollScheduler
from .session import StoryboardSession
from .video import VideoController

logger = logging.getLogger(__name__)


class Studio:
    """One storyboard session plus everything that generates media for it.

    Use as an async context manager so the poll scheduler never outlives
    the session::

        async with Studio.from_config(session) as studio:
            await studio.generate_all_images()
    """

    def __init__(
        self,
        session: Optional[StoryboardSession] = None,
        client: Optional[GenerationProvider] = None,
        poll_interval: Optional[float] = None,
        aspect_ratio: Optional[str] = None,
    ) -> None:
        self.session = session or StoryboardSession()
        self._client = client
        self.images = ImageController(self.session, client, aspect_ratio=aspect_ratio)
        self.videos = VideoController(self.session, client, on_submitted=self._arm_scheduler)
        self.scheduler = PollScheduler(
            self.session,
            self.videos.resolve_job,
            interval=poll_interval or default_config.poll_interval,
        )

    @classmethod
    def from_config(
        cls,
        session: Optional[StoryboardSession] = None,
        settings: Optional[Config] = None,
    ) -> "Studio":
        """Build a studio backed by Vertex AI.

        A configuration problem does not raise: it is recorded as the
        session's setup error and every generation request becomes a no-op.
        """
        settings = settings or default_config
        session = session or StoryboardSession()
        try:
            client: Optional[GenerationProvider] = GenerationClient(settings=settings)
        except ValueError as e:
            session.report_setup_error(
                f"Generation client unavailable: {e}"
            )
            client = None
        return cls(
            session,
            client,
            poll_interval=settings.poll_interval,
            aspect_ratio=settings.image_aspect_ratio,
        )

    @property
    def client_available(self) -> bool:
        return self._client is not None

    def _arm_scheduler(self) -> None:
        self.scheduler.arm()

    async def generate_image(self, scene_id: str) -> bool:
        return await self.images.generate_image(scene_id)

    async def generate_all_images(self) -> int:
        return await self.images.generate_all_images()

    async def animate_scene(self, scene_id: str) -> None:
        await self.videos.animate_scene(scene_id)

    async def wait_for_videos(self) -> None:
        """Block until no scene has a pending video job."""
        await self.scheduler.wait()

    async def close(self) -> None:
        await self.scheduler.stop()

    async def __aenter__(self) -> "Studio":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
