"""Pure operations over the ordered scene and character lists.

Every function takes the current list and returns a new one; inputs are
never mutated. Scenes and characters are matched by id, never by index, so
updates racing with removals cannot land on the wrong entry.
"""

from typing import Any, Optional

from ..models import Character, GenerationState, Scene

SCENE_TEXT_FIELDS = ("scene_description", "animation_prompt")
CHARACTER_TEXT_FIELDS = ("name", "description")


class InvalidTransition(ValueError):
    """Raised when a status update would make an illegal state change."""


def find_scene(scenes: list[Scene], scene_id: str) -> Optional[Scene]:
    return next((scene for scene in scenes if scene.id == scene_id), None)


def add_scene(scenes: list[Scene]) -> list[Scene]:
    """Append a blank idle scene numbered after the current last one."""
    next_number = max((scene.scene_number for scene in scenes), default=0) + 1
    return [*scenes, Scene(scene_number=next_number)]


def update_scene_field(
    scenes: list[Scene], scene_id: str, field: str, value: str
) -> list[Scene]:
    """Replace one text field of the scene matching ``scene_id``."""
    if field not in SCENE_TEXT_FIELDS:
        raise ValueError(f"Unknown scene field: {field}")
    return [
        scene.model_copy(update={field: value}) if scene.id == scene_id else scene
        for scene in scenes
    ]


def remove_scene(scenes: list[Scene], scene_id: str) -> list[Scene]:
    """Drop the scene matching ``scene_id`` and renumber the rest from 1."""
    remaining = [scene for scene in scenes if scene.id != scene_id]
    return [
        scene if scene.scene_number == number else scene.model_copy(update={"scene_number": number})
        for number, scene in enumerate(remaining, start=1)
    ]


def _merge_status(scene: Scene, changes: dict[str, Any]) -> Scene:
    for field in ("image_state", "video_state"):
        if field in changes:
            current = getattr(scene, field)
            target = GenerationState(changes[field])
            if not current.can_transition_to(target):
                raise InvalidTransition(
                    f"{scene.id}: {field} cannot go from {current.value} to {target.value}"
                )
    # Rebuild rather than copy so the model validators run on the result
    return Scene(**{**dict(scene), **changes})


def set_scene_status(scenes: list[Scene], scene_id: str, **changes: Any) -> list[Scene]:
    """Merge a partial status update into the scene matching ``scene_id``.

    Raises:
        InvalidTransition: If a state change is not allowed.
        pydantic.ValidationError: If the merged scene breaks an invariant.
    """
    return [
        _merge_status(scene, changes) if scene.id == scene_id else scene
        for scene in scenes
    ]


def add_character(characters: list[Character], name: str = "NEW CHARACTER",
                  description: str = "") -> list[Character]:
    return [*characters, Character(name=name, description=description)]


def update_character(
    characters: list[Character], character_id: str, field: str, value: str
) -> list[Character]:
    """Replace one text field of the character matching ``character_id``."""
    if field not in CHARACTER_TEXT_FIELDS:
        raise ValueError(f"Unknown character field: {field}")
    return [
        Character(**{**dict(character), field: value})
        if character.id == character_id else character
        for character in characters
    ]


def remove_character(characters: list[Character], character_id: str) -> list[Character]:
    return [character for character in characters if character.id != character_id]
