"""Generation provider contract and its Vertex AI implementation."""

import logging
from typing import Any, Optional, Protocol

from ..config import Config, config as default_config
from .imagen import ImageResult, ImagenClient
from .veo import VeoClient, VideoJobStatus

logger = logging.getLogger(__name__)


class GenerationProvider(Protocol):
    """Calls the storyboard controllers make against a media provider.

    Every method blocks; controllers run them off the event loop.
    Failures are raised as provider-defined exceptions.
    """

    def generate_image(self, prompt: str, aspect_ratio: str, count: int) -> ImageResult:
        ...

    def submit_video_job(self, prompt: str, image_bytes: bytes, mime_type: str) -> Any:
        ...

    def query_video_job(self, job: Any) -> VideoJobStatus:
        ...

    def fetch_video(self, uri: str) -> bytes:
        ...


class GenerationClient:
    """Vertex AI backed provider combining Imagen stills and Veo clips."""

    def __init__(
        self,
        imagen: Optional[ImagenClient] = None,
        veo: Optional[VeoClient] = None,
        settings: Optional[Config] = None,
    ) -> None:
        """Initialize both model clients.

        Raises:
            ValueError: If required configuration is missing.
        """
        settings = settings or default_config
        if imagen is None or veo is None:
            settings.validate_required()
        self._imagen = imagen or ImagenClient(
            project_id=settings.google_cloud_project,
            location=settings.google_cloud_location,
            model=settings.imagen_model,
        )
        self._veo = veo or VeoClient(
            project_id=settings.google_cloud_project,
            location=settings.google_cloud_location,
            output_bucket=settings.veo_output_bucket,
            model=settings.veo_model,
        )
        logger.info(
            f"Initialized generation client for project {self._imagen.project_id} "
            f"(images: {self._imagen.model}, video: {self._veo.model})"
        )

    def generate_image(self, prompt: str, aspect_ratio: str, count: int) -> ImageResult:
        return self._imagen.generate_images(prompt, aspect_ratio=aspect_ratio, num_images=count)

    def submit_video_job(self, prompt: str, image_bytes: bytes, mime_type: str) -> str:
        return self._veo.submit(prompt, image_bytes, mime_type)

    def query_video_job(self, job: str) -> VideoJobStatus:
        return self._veo.check(job)

    def fetch_video(self, uri: str) -> bytes:
        return self._veo.download(uri)
