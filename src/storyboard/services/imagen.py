"""Google Imagen API client wrapper via Vertex AI."""

import base64
import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..config import config
from .vertex import ProviderError, VertexClient

logger = logging.getLogger(__name__)


@dataclass
class ImageResult:
    """Result of an Imagen generation request."""

    prompt: str
    images: list[bytes] = field(default_factory=list)


class ImagenClient(VertexClient):
    """Client wrapper for Google Imagen image generation via Vertex AI."""

    DEFAULT_MODEL = "imagen-4.0-generate-001"

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        model: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the Imagen client.

        Args:
            project_id: Google Cloud project ID.
            location: GCP region for Vertex AI.
            model: Imagen model name.
            session: Optional requests session.
        """
        super().__init__(project_id=project_id, location=location, session=session)
        self._model = model or config.imagen_model or self.DEFAULT_MODEL

    @property
    def model(self) -> str:
        return self._model

    def generate_images(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        num_images: int = 1,
    ) -> ImageResult:
        """Generate images from a text prompt.

        Args:
            prompt: Text description of the image to generate.
            aspect_ratio: Image aspect ratio ('1:1', '16:9', '9:16', '4:3', '3:4').
            num_images: Number of images to generate.

        Returns:
            ImageResult holding the decoded image bytes.

        Raises:
            ProviderError: If the API call fails or returns no image data.
        """
        request_body = {
            "instances": [
                {"prompt": prompt}
            ],
            "parameters": {
                "sampleCount": num_images,
                "aspectRatio": aspect_ratio,
            },
        }

        logger.info(f"Generating image with Imagen: {prompt[:50]}...")
        data = self._post(self.model_url(self._model, "predict"), request_body)

        images = [
            base64.b64decode(prediction["bytesBase64Encoded"])
            for prediction in data.get("predictions", [])
            if prediction.get("bytesBase64Encoded")
        ]
        if not images:
            # Safety filtering drops predictions without raising an error
            raise ProviderError("No image data in response")

        logger.debug(f"Imagen returned {len(images)} image(s)")
        return ImageResult(prompt=prompt, images=images)
