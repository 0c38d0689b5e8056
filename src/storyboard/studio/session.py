"""State of one storyboard editing session."""

import logging
from typing import Any, Optional

from ..models import Character, GenerationState, Scene, Storyboard
from . import registry
from .quota import QuotaGuard

logger = logging.getLogger(__name__)

QUOTA_STOPPED_MESSAGE = "Animation stopped: API quota exceeded."


class StoryboardSession:
    """Scenes, characters and session flags for one user session.

    The session is the single source of truth read and written by the
    controllers and the poll scheduler. Each mutation replaces the held list
    with a fresh one from :mod:`storyboard.studio.registry`, so snapshots
    handed out earlier never change underneath their holders.
    """

    def __init__(
        self,
        scenes: Optional[list[Scene]] = None,
        characters: Optional[list[Character]] = None,
    ) -> None:
        self._scenes: list[Scene] = list(scenes or [])
        self._characters: list[Character] = list(characters or [])
        self.quota = QuotaGuard()
        self.is_generating = False
        self.setup_error: Optional[str] = None
        self.quota.on_trip(self._stop_animations)

    @classmethod
    def from_storyboard(cls, storyboard: Storyboard) -> "StoryboardSession":
        """Start a session from the text of a storyboard file."""
        session = cls()
        for draft in storyboard.characters:
            session.add_character(draft.name, draft.description)
        for draft in storyboard.scenes:
            scene = session.add_scene()
            session.update_scene_field(scene.id, "scene_description", draft.description)
            session.update_scene_field(scene.id, "animation_prompt", draft.animation_prompt)
        return session

    @property
    def scenes(self) -> list[Scene]:
        return self._scenes

    @property
    def characters(self) -> list[Character]:
        return self._characters

    @property
    def quota_exceeded(self) -> bool:
        return self.quota.exceeded

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        return registry.find_scene(self._scenes, scene_id)

    def pollable_scenes(self) -> list[Scene]:
        """Scenes with a submitted video job awaiting resolution."""
        return [scene for scene in self._scenes if scene.is_pollable]

    def report_setup_error(self, message: str) -> None:
        if self.setup_error != message:
            logger.error(f"Setup error: {message}")
        self.setup_error = message

    # Scenes

    def add_scene(self) -> Scene:
        self._scenes = registry.add_scene(self._scenes)
        return self._scenes[-1]

    def update_scene_field(self, scene_id: str, field: str, value: str) -> None:
        self._scenes = registry.update_scene_field(self._scenes, scene_id, field, value)

    def remove_scene(self, scene_id: str) -> None:
        self._scenes = registry.remove_scene(self._scenes, scene_id)

    def set_scene_status(self, scene_id: str, **changes: Any) -> None:
        self._scenes = registry.set_scene_status(self._scenes, scene_id, **changes)

    # Characters

    def add_character(self, name: str = "NEW CHARACTER", description: str = "") -> Character:
        self._characters = registry.add_character(self._characters, name, description)
        return self._characters[-1]

    def update_character(self, character_id: str, field: str, value: str) -> None:
        self._characters = registry.update_character(self._characters, character_id, field, value)

    def remove_character(self, character_id: str) -> None:
        self._characters = registry.remove_character(self._characters, character_id)

    def _stop_animations(self) -> None:
        """Force-fail every in-flight animation once the quota is gone."""
        stopped = [
            scene.id for scene in self._scenes
            if scene.video_state == GenerationState.LOADING
        ]
        for scene_id in stopped:
            self.set_scene_status(
                scene_id,
                video_state=GenerationState.ERROR,
                pending_video_job=None,
                last_error_message=QUOTA_STOPPED_MESSAGE,
            )
        if stopped:
            logger.warning(f"Stopped {len(stopped)} in-flight animation(s) after quota exhaustion")
