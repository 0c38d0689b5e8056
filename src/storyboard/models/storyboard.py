"""Storyboard seed document."""

from typing import List
from pathlib import Path
from pydantic import BaseModel, Field
import yaml


class CharacterDraft(BaseModel):
    """Character as written in a storyboard file."""

    name: str = Field(..., description="Character name")
    description: str = Field(default="", description="Visual description")


class SceneDraft(BaseModel):
    """Scene as written in a storyboard file."""

    description: str = Field(default="", description="Scene description")
    animation_prompt: str = Field(default="", description="Optional animation prompt")


class Storyboard(BaseModel):
    """Storyboard file: the text a session starts from."""

    title: str = Field(default="Untitled storyboard", description="Storyboard title")
    characters: List[CharacterDraft] = Field(default_factory=list, description="Characters")
    scenes: List[SceneDraft] = Field(default_factory=list, description="Scenes in order")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_yaml(cls, path: Path) -> "Storyboard":
        """Load storyboard from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save storyboard to YAML file."""
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, sort_keys=False)


def demo_storyboard() -> Storyboard:
    """Return the three-scene rooftop storyboard used by ``storyboard init``."""
    return Storyboard(
        title="Neon Rooftop",
        characters=[
            CharacterDraft(
                name="ZARA",
                description=(
                    "A young woman in her early 20s with short, punk-rock pink hair, "
                    "wearing a worn-out black leather jacket, and has a cybernetic "
                    "implant above her right eye. She has a fierce and determined expression."
                ),
            ),
            CharacterDraft(
                name="ALEX",
                description=(
                    "A tall, mysterious man in his late 30s with a rugged beard, a long "
                    "dark trench coat, and piercing blue eyes. He looks calm and calculating."
                ),
            ),
        ],
        scenes=[
            SceneDraft(
                description=(
                    "A young woman, ZARA, stands on a neon-lit rooftop overlooking a "
                    "futuristic city at night. Rain is falling. She looks determined."
                ),
                animation_prompt=(
                    "Cinematic shot, rain falling slowly, subtle steam rising from "
                    "the city streets below."
                ),
            ),
            SceneDraft(
                description=(
                    "CLOSE UP on ZARA's face. A single tear mixes with the rain on her cheek."
                ),
                animation_prompt="Slow zoom-in on her face, focus on the tear, melancholic mood.",
            ),
            SceneDraft(
                description=(
                    "A man, ALEX, emerges from the shadows behind her. He's holding a "
                    "strange, glowing device. ZARA turns around, startled."
                ),
                animation_prompt=(
                    "A quick pan as Zara turns around, the device glows brightly, "
                    "creating lens flare."
                ),
            ),
        ],
    )
