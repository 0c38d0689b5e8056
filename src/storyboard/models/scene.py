"""Scene data model."""

from enum import Enum
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class GenerationState(str, Enum):
    """Status of a scene's image or video generation."""

    IDLE = "idle"
    LOADING = "loading"
    DONE = "done"
    ERROR = "error"

    def can_transition_to(self, target: "GenerationState") -> bool:
        """Return True if moving from this state to ``target`` is legal."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[GenerationState, frozenset[GenerationState]] = {
    GenerationState.IDLE: frozenset({GenerationState.IDLE, GenerationState.LOADING}),
    GenerationState.LOADING: frozenset({
        GenerationState.LOADING,
        GenerationState.DONE,
        GenerationState.ERROR,
    }),
    GenerationState.DONE: frozenset({GenerationState.DONE, GenerationState.LOADING}),
    GenerationState.ERROR: frozenset({GenerationState.ERROR, GenerationState.LOADING}),
}


class ImageAsset(BaseModel):
    """A generated still image."""

    data: bytes = Field(..., description="Raw image bytes")
    mime_type: str = Field(default="image/png", description="Image MIME type")

    class Config:
        """Pydantic config."""
        frozen = True

    def save(self, path: Path) -> Path:
        """Write the image to ``path`` and return it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


class VideoAsset(BaseModel):
    """A generated animated clip."""

    data: bytes = Field(..., description="Raw clip bytes")
    mime_type: str = Field(default="video/mp4", description="Clip MIME type")
    source_uri: Optional[str] = Field(None, description="Location the clip was fetched from")

    class Config:
        """Pydantic config."""
        frozen = True

    def save(self, path: Path) -> Path:
        """Write the clip to ``path`` and return it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.data)
        return path


def new_scene_id() -> str:
    return f"scene-{uuid4().hex[:12]}"


class Scene(BaseModel):
    """A single storyboard scene and its generation state."""

    id: str = Field(default_factory=new_scene_id, description="Unique scene identifier")
    scene_number: int = Field(..., description="1-based position in the storyboard", ge=1)
    scene_description: str = Field(default="", description="What the still should depict")
    animation_prompt: str = Field(default="", description="How the still should be animated")
    image_asset: Optional[ImageAsset] = Field(None, description="Generated still image")
    image_state: GenerationState = Field(default=GenerationState.IDLE)
    video_asset: Optional[VideoAsset] = Field(None, description="Generated clip")
    video_state: GenerationState = Field(default=GenerationState.IDLE)
    pending_video_job: Optional[Any] = Field(None, description="Opaque in-flight video job handle")
    last_error_message: Optional[str] = Field(None, description="Most recent failure message")

    class Config:
        """Pydantic config."""
        frozen = True
        extra = "forbid"

    @model_validator(mode="after")
    def _check_video_invariants(self) -> "Scene":
        if self.video_asset is not None and self.video_state != GenerationState.DONE:
            raise ValueError("video_asset may only be set when video_state is done")
        if self.pending_video_job is not None and self.video_state != GenerationState.LOADING:
            raise ValueError("pending_video_job may only be set when video_state is loading")
        return self

    @property
    def is_pollable(self) -> bool:
        """True while a submitted video job awaits resolution."""
        return (
            self.video_state == GenerationState.LOADING
            and self.pending_video_job is not None
        )
