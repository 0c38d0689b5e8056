"""Data models for the storyboard generator."""

from .scene import GenerationState, ImageAsset, Scene, VideoAsset
from .character import Character
from .storyboard import CharacterDraft, SceneDraft, Storyboard, demo_storyboard

__all__ = [
    "GenerationState",
    "ImageAsset",
    "Scene",
    "VideoAsset",
    "Character",
    "CharacterDraft",
    "SceneDraft",
    "Storyboard",
    "demo_storyboard",
]
