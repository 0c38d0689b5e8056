"""Google Veo API client wrapper via Vertex AI."""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from google.cloud import storage

from ..config import config
from .vertex import ProviderError, VertexClient

logger = logging.getLogger(__name__)

# google.rpc.Code numbers reported in long-running operation errors
_RPC_STATUS_NAMES = {
    1: "CANCELLED",
    3: "INVALID_ARGUMENT",
    4: "DEADLINE_EXCEEDED",
    7: "PERMISSION_DENIED",
    8: "RESOURCE_EXHAUSTED",
    9: "FAILED_PRECONDITION",
    13: "INTERNAL",
    14: "UNAVAILABLE",
}


@dataclass
class VideoJobStatus:
    """Status of a submitted Veo operation."""

    done: bool
    result_uri: Optional[str] = None


class VeoClient(VertexClient):
    """Client wrapper for Google Veo image-to-video generation via Vertex AI.

    This client handles:
    - Submitting long-running generation requests seeded with a still image
    - Checking operation status on demand (polling cadence belongs to the caller)
    - Downloading generated clips from GCS or an authenticated URL
    """

    DEFAULT_MODEL = "veo-2.0-generate-001"

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        output_bucket: Optional[str] = None,
        model: Optional[str] = None,
        session: Optional[requests.Session] = None,
        storage_client: Optional[storage.Client] = None,
    ) -> None:
        """Initialize the Veo client.

        Args:
            project_id: Google Cloud project ID. Defaults to GOOGLE_CLOUD_PROJECT env var.
            location: GCP region for Vertex AI.
            output_bucket: GCS bucket for output videos. Defaults to VEO_OUTPUT_BUCKET env var.
            model: Veo model name.
            session: Optional requests session.
            storage_client: Optional GCS client; created on first download otherwise.
        """
        super().__init__(project_id=project_id, location=location, session=session)
        self._output_bucket = output_bucket or config.veo_output_bucket
        self._model = model or config.veo_model or self.DEFAULT_MODEL
        self._storage_client = storage_client

        if not self._output_bucket:
            raise ValueError("VEO_OUTPUT_BUCKET not set")
        if not self._output_bucket.startswith("gs://"):
            raise ValueError(
                f"VEO_OUTPUT_BUCKET must be a GCS URI starting with 'gs://'. "
                f"Got: {self._output_bucket}"
            )

    @property
    def model(self) -> str:
        return self._model

    @property
    def output_bucket(self) -> str:
        """Return the output GCS bucket."""
        return self._output_bucket

    def submit(self, prompt: str, image_bytes: bytes, mime_type: str = "image/png") -> str:
        """Submit an image-to-video generation request.

        Args:
            prompt: How the seed image should be animated.
            image_bytes: Seed image.
            mime_type: MIME type of the seed image.

        Returns:
            The operation name, used as the job handle for ``check``.

        Raises:
            ProviderError: If the submission is rejected.
        """
        if not prompt or not prompt.strip():
            raise ValueError("Prompt cannot be empty")

        request_body = {
            "instances": [
                {
                    "prompt": prompt,
                    "image": {
                        "bytesBase64Encoded": base64.b64encode(image_bytes).decode("ascii"),
                        "mimeType": mime_type,
                    },
                }
            ],
            "parameters": {
                "sampleCount": 1,
                "storageUri": self._output_bucket.rstrip("/") + "/",
            },
        }

        logger.info(f"Starting Veo generation: {prompt[:50]}...")
        data = self._post(self.model_url(self._model, "predictLongRunning"), request_body)

        operation_name = data.get("name")
        if not operation_name:
            raise ProviderError("Veo did not return an operation name")

        logger.debug(f"Veo operation submitted: {operation_name}")
        return operation_name

    def check(self, operation_name: str) -> VideoJobStatus:
        """Check the status of a submitted operation.

        Args:
            operation_name: Operation name returned by ``submit``.

        Returns:
            VideoJobStatus; ``result_uri`` is set once a clip is available.

        Raises:
            ProviderError: If the status request fails or the operation
                finished with an error.
        """
        data = self._post(
            self.model_url(self._model, "fetchPredictOperation"),
            {"operationName": operation_name},
        )

        if not data.get("done"):
            logger.debug(f"Operation still running: {operation_name}")
            return VideoJobStatus(done=False)

        error = data.get("error")
        if error:
            status = _RPC_STATUS_NAMES.get(error.get("code"), "UNKNOWN")
            logger.error(f"Operation {operation_name} failed: {error.get('message')}")
            raise ProviderError(json.dumps({
                "error": {
                    "code": error.get("code"),
                    "message": error.get("message", "Video generation failed"),
                    "status": status,
                }
            }))

        videos = (data.get("response") or {}).get("videos") or []
        result_uri = videos[0].get("gcsUri") if videos else None
        logger.info(f"Operation {operation_name} completed: {result_uri}")
        return VideoJobStatus(done=True, result_uri=result_uri)

    def download(self, uri: str) -> bytes:
        """Download a generated clip.

        Args:
            uri: ``gs://bucket/path`` or an https URL.

        Returns:
            The raw clip bytes.
        """
        if uri.startswith("gs://"):
            return self._download_from_gcs(uri)
        return self._get_bytes(uri)

    def _download_from_gcs(self, gcs_uri: str) -> bytes:
        """Download a blob from GCS into memory."""
        uri_parts = gcs_uri[5:].split("/", 1)
        if len(uri_parts) != 2 or not uri_parts[1]:
            raise ValueError(f"Invalid GCS URI format: {gcs_uri}")

        bucket_name, blob_name = uri_parts

        if self._storage_client is None:
            self._storage_client = storage.Client(project=self._project_id)

        blob = self._storage_client.bucket(bucket_name).blob(blob_name)
        data = blob.download_as_bytes()
        logger.debug(f"Downloaded {gcs_uri} ({len(data)} bytes)")
        return data
