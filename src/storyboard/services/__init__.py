"""External service integrations."""

from .client import GenerationClient, GenerationProvider
from .imagen import ImagenClient, ImageResult
from .veo import VeoClient, VideoJobStatus
from .vertex import ProviderError

__all__ = [
    "GenerationClient",
    "GenerationProvider",
    "ImagenClient",
    "ImageResult",
    "VeoClient",
    "VideoJobStatus",
    "ProviderError",
]
