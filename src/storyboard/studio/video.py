"""Animated clip generation for storyboard scenes."""

import asyncio
from typing import Any, Callable, Optional

from ..models import GenerationState, Scene, VideoAsset
from ..services.client import GenerationProvider
from .base import BaseController
from .session import StoryboardSession

NO_RESULT_MESSAGE = "Video generation finished but no result was returned."


class VideoJobError(Exception):
    """A video job ended without a usable clip."""


def build_animation_prompt(scene: Scene) -> str:
    if scene.animation_prompt:
        return scene.animation_prompt
    return f"Animate this scene with a subtle, cinematic feel: {scene.scene_description}"


class VideoController(BaseController):
    """Submits image-to-video jobs and resolves them once they finish.

    Submission returns as soon as the provider hands back a job handle;
    the poll scheduler later drives :meth:`resolve_job` for each pending
    handle until the clip is downloaded or the job fails.
    """

    def __init__(
        self,
        session: StoryboardSession,
        client: Optional[GenerationProvider] = None,
        on_submitted: Optional[Callable[[], None]] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            session: Session whose scenes this controller drives.
            client: Generation provider.
            on_submitted: Called after a job handle is stored, to arm polling.
        """
        super().__init__(session, client)
        self._on_submitted = on_submitted

    @property
    def name(self) -> str:
        return "VideoController"

    def _still_pending(self, scene_id: str, job: Any) -> bool:
        scene = self._session.get_scene(scene_id)
        return (
            scene is not None
            and scene.video_state == GenerationState.LOADING
            and scene.pending_video_job == job
        )

    async def animate_scene(self, scene_id: str) -> None:
        """Submit an animation job seeded with the scene's current image.

        No-op when the quota is exhausted, the scene is unknown, has no
        image yet, or is already animating.
        """
        if not self._ready():
            return

        scene = self._session.get_scene(scene_id)
        if scene is None or scene.image_asset is None:
            return
        if scene.video_state == GenerationState.LOADING:
            self._logger.debug(f"Scene {scene.scene_number} is already animating")
            return

        self._session.set_scene_status(
            scene_id, video_state=GenerationState.LOADING, video_asset=None
        )
        prompt = build_animation_prompt(scene)

        try:
            job = await asyncio.to_thread(
                self._client.submit_video_job,
                prompt,
                scene.image_asset.data,
                scene.image_asset.mime_type,
            )
        except Exception as e:
            classified = self._classify(e, f"Error animating scene {scene.scene_number}")
            if self._still_pending(scene_id, None):
                self._session.set_scene_status(
                    scene_id,
                    video_state=GenerationState.ERROR,
                    last_error_message=classified.message,
                )
            self._escalate(classified)
            return

        if not self._still_pending(scene_id, None):
            # Removed or force-failed while the submission was in flight
            self._logger.warning(f"Dropping video job for scene {scene_id}: scene no longer animating")
            return

        self._logger.info(f"Submitted animation for scene {scene.scene_number}")
        self._session.set_scene_status(scene_id, pending_video_job=job)
        if self._on_submitted is not None:
            self._on_submitted()

    async def resolve_job(self, scene_id: str, job: Any) -> None:
        """Check one pending job and settle the scene if it has finished.

        Results for a scene that is no longer waiting on ``job`` are discarded.
        """
        try:
            status = await asyncio.to_thread(self._client.query_video_job, job)
            if not status.done:
                return
            if not status.result_uri:
                raise VideoJobError(NO_RESULT_MESSAGE)
            data = await asyncio.to_thread(self._client.fetch_video, status.result_uri)
        except Exception as e:
            classified = self._classify(e, f"Error polling video status for {scene_id}")
            if self._still_pending(scene_id, job):
                self._session.set_scene_status(
                    scene_id,
                    video_state=GenerationState.ERROR,
                    pending_video_job=None,
                    last_error_message=classified.message,
                )
            self._escalate(classified)
            return

        if not self._still_pending(scene_id, job):
            self._logger.debug(f"Discarding stale video result for {scene_id}")
            return

        self._logger.info(f"Animation complete for {scene_id}")
        self._session.set_scene_status(
            scene_id,
            video_state=GenerationState.DONE,
            video_asset=VideoAsset(data=data, source_uri=status.result_uri),
            pending_video_job=None,
        )
