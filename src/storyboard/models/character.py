"""Character data model."""

from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def new_character_id() -> str:
    return f"char-{uuid4().hex[:12]}"


class Character(BaseModel):
    """Appearance notes injected into every image prompt."""

    id: str = Field(default_factory=new_character_id, description="Unique character identifier")
    name: str = Field(default="NEW CHARACTER", description="Character name, upper-cased")
    description: str = Field(default="", description="Visual description")

    class Config:
        """Pydantic config."""
        frozen = True

    @field_validator("name")
    @classmethod
    def _upper_name(cls, value: str) -> str:
        return value.upper()
