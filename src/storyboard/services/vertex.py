"""Shared Vertex AI REST plumbing for the Imagen and Veo clients."""

import logging
from typing import Optional

import google.auth
import google.auth.transport.requests
import requests

from ..config import config

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]


class ProviderError(Exception):
    """A failed call to the generation provider.

    The message is the provider's response body, which for Vertex AI is a
    JSON document of the form ``{"error": {"code", "message", "status"}}``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class VertexClient:
    """Base class for clients calling Vertex AI publisher models over REST."""

    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            project_id: Google Cloud project ID. Defaults to GOOGLE_CLOUD_PROJECT env var.
            location: GCP region for Vertex AI. Defaults to GOOGLE_CLOUD_LOCATION env var.
            session: Optional requests session (mainly for tests).
            timeout: Per-request HTTP timeout in seconds.

        Raises:
            ValueError: If the project ID is not configured.
        """
        self._project_id = project_id or config.google_cloud_project
        self._location = location or config.google_cloud_location
        self._http = session or requests.Session()
        self._timeout = timeout
        self._credentials = None

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def location(self) -> str:
        return self._location

    def model_url(self, model: str, method: str) -> str:
        """Return the REST URL for ``method`` on a publisher model."""
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/"
            f"projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{model}:{method}"
        )

    def _access_token(self) -> str:
        """Return a fresh OAuth token from application default credentials."""
        if self._credentials is None:
            self._credentials, _ = google.auth.default(scopes=SCOPES)
        if not self._credentials.valid:
            self._credentials.refresh(google.auth.transport.requests.Request())
        return self._credentials.token

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token()}",
            "Content-Type": "application/json",
        }

    def _post(self, url: str, body: dict) -> dict:
        """POST a JSON body and return the decoded JSON response.

        Raises:
            ProviderError: If the response status is not 2xx.
        """
        response = self._http.post(
            url, json=body, headers=self._auth_headers(), timeout=self._timeout
        )
        if not response.ok:
            logger.error(f"Vertex AI error {response.status_code}: {response.text[:500]}")
            raise ProviderError(response.text, status_code=response.status_code)
        return response.json()

    def _get_bytes(self, url: str) -> bytes:
        """Download ``url`` with the client's credentials.

        Raises:
            ProviderError: If the response status is not 2xx.
        """
        headers = {"Authorization": f"Bearer {self._access_token()}"}
        response = self._http.get(url, headers=headers, timeout=self._timeout)
        if not response.ok:
            logger.error(f"Download failed {response.status_code}: {url}")
            raise ProviderError(response.text, status_code=response.status_code)
        return response.content
