"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config(BaseModel):
    """Application configuration."""

    # Google Cloud
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID"
    )
    google_cloud_location: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1"),
        description="Vertex AI region"
    )
    veo_output_bucket: str = Field(
        default_factory=lambda: os.getenv("VEO_OUTPUT_BUCKET", ""),
        description="GCS bucket for Veo output"
    )

    # Paths
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("STORYBOARD_WORKSPACE", ".")),
        description="Base directory for the default storyboard file and renders"
    )

    # Model settings
    imagen_model: str = Field(
        default_factory=lambda: os.getenv("IMAGEN_MODEL", "imagen-4.0-generate-001"),
        description="Imagen model used for scene stills"
    )
    veo_model: str = Field(
        default_factory=lambda: os.getenv("VEO_MODEL", "veo-2.0-generate-001"),
        description="Veo model used for scene animation"
    )
    image_aspect_ratio: str = Field(
        default_factory=lambda: os.getenv("STORYBOARD_IMAGE_ASPECT_RATIO", "16:9"),
        description="Aspect ratio of generated stills"
    )
    poll_interval: float = Field(
        default_factory=lambda: float(os.getenv("STORYBOARD_POLL_INTERVAL", "10")),
        description="Seconds between video job status checks",
        gt=0
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that Vertex AI credentials are set.

        Raises:
            ValueError: If any required configuration is missing.
        """
        missing: list[str] = []

        if not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")
        if not self.veo_output_bucket:
            missing.append("VEO_OUTPUT_BUCKET")

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

        # Validate bucket format
        if not self.veo_output_bucket.startswith("gs://"):
            raise ValueError(
                f"VEO_OUTPUT_BUCKET must be a GCS URI starting with 'gs://'. "
                f"Got: {self.veo_output_bucket}"
            )


# Global config instance
config = Config()
