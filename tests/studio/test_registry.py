"""
Tests for storyboard.studio.registry

Pure list operations: new lists out, inputs untouched, matching by id.
"""

import random

import pytest
from pydantic import ValidationError

from storyboard.models import GenerationState, ImageAsset, Scene, VideoAsset
from storyboard.studio import registry
from storyboard.studio.registry import InvalidTransition


def _numbers(scenes):
    return [scene.scene_number for scene in scenes]


def _three():
    scenes = []
    for _ in range(3):
        scenes = registry.add_scene(scenes)
    return scenes


class TestAddAndRemove:

    def test_add_scene_defaults(self):
        scenes = registry.add_scene([])
        assert len(scenes) == 1
        scene = scenes[0]
        assert scene.scene_number == 1
        assert scene.scene_description == ""
        assert scene.animation_prompt == ""
        assert scene.image_state == GenerationState.IDLE
        assert scene.video_state == GenerationState.IDLE
        assert scene.image_asset is None
        assert scene.pending_video_job is None

    def test_ids_are_unique(self):
        scenes = _three()
        assert len({scene.id for scene in scenes}) == 3

    def test_remove_middle_renumbers_in_order(self):
        scenes = _three()
        first, middle, last = scenes
        result = registry.remove_scene(scenes, middle.id)
        assert [scene.id for scene in result] == [first.id, last.id]
        assert _numbers(result) == [1, 2]

    def test_remove_unknown_id_is_noop(self):
        scenes = _three()
        assert registry.remove_scene(scenes, "scene-missing") == scenes

    def test_operations_do_not_mutate_input(self):
        scenes = _three()
        snapshot = list(scenes)
        registry.remove_scene(scenes, scenes[0].id)
        registry.add_scene(scenes)
        assert scenes == snapshot
        assert _numbers(scenes) == [1, 2, 3]

    @pytest.mark.parametrize("seed", [1, 7, 42, 99])
    def test_numbers_always_contiguous(self, seed):
        rng = random.Random(seed)
        scenes = []
        for _ in range(60):
            if scenes and rng.random() < 0.4:
                scenes = registry.remove_scene(scenes, rng.choice(scenes).id)
            else:
                scenes = registry.add_scene(scenes)
            assert _numbers(scenes) == list(range(1, len(scenes) + 1))


class TestUpdateSceneField:

    def test_updates_matching_scene_only(self):
        scenes = _three()
        result = registry.update_scene_field(scenes, scenes[1].id, "scene_description", "Rain")
        assert result[1].scene_description == "Rain"
        assert result[0].scene_description == ""
        assert scenes[1].scene_description == ""

    def test_unknown_id_is_noop(self):
        scenes = _three()
        assert registry.update_scene_field(scenes, "nope", "animation_prompt", "x") == scenes

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            registry.update_scene_field(_three(), "nope", "image_state", "done")


class TestSetSceneStatus:

    def test_merges_partial_update(self):
        scenes = _three()
        target = scenes[2].id
        scenes = registry.set_scene_status(scenes, target, image_state=GenerationState.LOADING)
        scenes = registry.set_scene_status(
            scenes, target,
            image_state=GenerationState.DONE,
            image_asset=ImageAsset(data=b"png"),
        )
        assert scenes[2].image_state == GenerationState.DONE
        assert scenes[2].image_asset.data == b"png"
        assert scenes[0].image_state == GenerationState.IDLE

    def test_updates_by_id_after_removal(self):
        scenes = _three()
        last_id = scenes[2].id
        scenes = registry.remove_scene(scenes, scenes[0].id)
        scenes = registry.set_scene_status(scenes, last_id, video_state=GenerationState.LOADING)
        assert scenes[1].id == last_id
        assert scenes[1].video_state == GenerationState.LOADING
        assert scenes[0].video_state == GenerationState.IDLE

    def test_unknown_id_is_noop(self):
        scenes = _three()
        assert registry.set_scene_status(scenes, "nope", image_state=GenerationState.LOADING) == scenes

    def test_illegal_transition_rejected(self):
        scenes = _three()
        with pytest.raises(InvalidTransition):
            registry.set_scene_status(scenes, scenes[0].id, image_state=GenerationState.DONE)

    def test_job_handle_requires_loading(self):
        scenes = _three()
        with pytest.raises(ValidationError):
            registry.set_scene_status(scenes, scenes[0].id, pending_video_job="operations/1")

    def test_video_asset_requires_done(self):
        scenes = _three()
        target = scenes[0].id
        scenes = registry.set_scene_status(scenes, target, video_state=GenerationState.LOADING)
        with pytest.raises(ValidationError):
            registry.set_scene_status(scenes, target, video_asset=VideoAsset(data=b"mp4"))

    def test_unknown_status_field_rejected(self):
        scenes = _three()
        with pytest.raises(ValidationError):
            registry.set_scene_status(scenes, scenes[0].id, colour="red")


class TestGenerationState:

    @pytest.mark.parametrize("source,target,allowed", [
        (GenerationState.IDLE, GenerationState.LOADING, True),
        (GenerationState.IDLE, GenerationState.DONE, False),
        (GenerationState.IDLE, GenerationState.ERROR, False),
        (GenerationState.LOADING, GenerationState.DONE, True),
        (GenerationState.LOADING, GenerationState.ERROR, True),
        (GenerationState.LOADING, GenerationState.IDLE, False),
        (GenerationState.DONE, GenerationState.LOADING, True),
        (GenerationState.DONE, GenerationState.ERROR, False),
        (GenerationState.ERROR, GenerationState.LOADING, True),
        (GenerationState.ERROR, GenerationState.DONE, False),
    ])
    def test_transition_table(self, source, target, allowed):
        assert source.can_transition_to(target) is allowed


class TestCharacters:

    def test_add_update_remove(self):
        characters = registry.add_character([], "zara", "pink hair")
        assert characters[0].name == "ZARA"
        char_id = characters[0].id

        characters = registry.update_character(characters, char_id, "name", "zara k")
        assert characters[0].name == "ZARA K"
        characters = registry.update_character(characters, char_id, "description", "green hair")
        assert characters[0].description == "green hair"

        assert registry.remove_character(characters, char_id) == []

    def test_update_unknown_character_is_noop(self):
        characters = registry.add_character([])
        assert registry.update_character(characters, "nope", "name", "X") == characters

    def test_scene_model_is_frozen(self):
        scene = Scene(scene_number=1)
        with pytest.raises(ValidationError):
            scene.scene_description = "mutated"
