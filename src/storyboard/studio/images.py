"""Still image generation for storyboard scenes."""

import asyncio
from typing import Optional

from ..config import config
from ..models import Character, GenerationState, ImageAsset, Scene
from ..services.client import GenerationProvider
from .base import BaseController
from .session import StoryboardSession


def build_image_prompt(scene: Scene, characters: list[Character]) -> str:
    """Combine the character notes and the scene description into one prompt."""
    frame = (
        "Create a cinematic, atmospheric storyboard frame for the following scene: "
        f"{scene.scene_description}"
    )
    if not characters:
        return frame
    character_context = "For character consistency, adhere to these descriptions: " + "; ".join(
        f"[{character.name.upper()}: {character.description}]" for character in characters
    )
    return f"{character_context}. {frame}"


class ImageController(BaseController):
    """Generates one still per scene, one request at a time per scene."""

    def __init__(
        self,
        session: StoryboardSession,
        client: Optional[GenerationProvider] = None,
        aspect_ratio: Optional[str] = None,
    ) -> None:
        super().__init__(session, client)
        self._aspect_ratio = aspect_ratio or config.image_aspect_ratio

    @property
    def name(self) -> str:
        return "ImageController"

    async def generate_image(self, scene_id: str) -> bool:
        """Generate (or regenerate) the still for one scene.

        Returns True if a request was made for the scene, whatever its
        outcome. No-op (False) when the quota is exhausted, the scene is
        unknown, its description is empty, or an image request for it is
        already running.
        """
        if not self._ready():
            return False

        scene = self._session.get_scene(scene_id)
        if scene is None or not scene.scene_description:
            return False
        if scene.image_state == GenerationState.LOADING:
            self._logger.debug(f"Image already generating for scene {scene.scene_number}")
            return False

        self._session.set_scene_status(scene_id, image_state=GenerationState.LOADING)
        prompt = build_image_prompt(scene, self._session.characters)

        try:
            result = await asyncio.to_thread(
                self._client.generate_image, prompt, self._aspect_ratio, 1
            )
            if not result.images:
                raise ValueError("Image generation finished but no image was returned.")
        except Exception as e:
            classified = self._classify(
                e, f"Error generating image for scene {scene.scene_number}"
            )
            self._session.set_scene_status(
                scene_id,
                image_state=GenerationState.ERROR,
                last_error_message=classified.message,
            )
            self._escalate(classified)
            return True

        self._logger.info(f"Generated image for scene {scene.scene_number}")
        self._session.set_scene_status(
            scene_id,
            image_asset=ImageAsset(data=result.images[0]),
            image_state=GenerationState.DONE,
        )
        return True

    async def generate_all_images(self) -> int:
        """Generate stills for every idle or failed scene, one after another.

        Stops before the next scene as soon as the quota guard trips.

        Returns:
            Number of scenes an image was actually requested for; scenes
            removed or emptied while the batch ran are not counted.
        """
        if self._session.is_generating or not self._ready():
            return 0

        pending = [
            scene.id
            for scene in sorted(self._session.scenes, key=lambda s: s.scene_number)
            if scene.scene_description
            and scene.image_state in (GenerationState.IDLE, GenerationState.ERROR)
        ]
        self._logger.info(f"Generating images for {len(pending)} scene(s)")

        attempted = 0
        self._session.is_generating = True
        try:
            for scene_id in pending:
                if self._session.quota_exceeded:
                    self._logger.warning("Quota exceeded; skipping remaining scenes")
                    break
                if await self.generate_image(scene_id):
                    attempted += 1
        finally:
            self._session.is_generating = False

        return attempted
