"""
Tests for the Vertex AI REST clients (Imagen, Veo) and the provider facade.

HTTP and credentials are mocked; no request leaves the process.
"""

import base64
import json
from unittest.mock import MagicMock, patch

import pytest

from storyboard.config import Config
from storyboard.services import GenerationClient, ImagenClient, ProviderError, VeoClient
from storyboard.services.imagen import ImageResult
from storyboard.studio.errors import classify_error


def _response(status_code=200, payload=None, content=b""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload or {}
    response.text = json.dumps(payload) if payload is not None else ""
    response.content = content
    return response


@pytest.fixture(autouse=True)
def credentials():
    creds = MagicMock(valid=True, token="test-token")
    with patch("google.auth.default", return_value=(creds, "test-project")) as default:
        yield default


@pytest.fixture
def http():
    return MagicMock()


class TestImagenClient:

    def test_requires_project(self):
        with pytest.raises(ValueError, match="GOOGLE_CLOUD_PROJECT"):
            ImagenClient(project_id="")

    def test_generate_images(self, http):
        http.post.return_value = _response(payload={
            "predictions": [{"bytesBase64Encoded": base64.b64encode(b"png-bytes").decode()}]
        })
        client = ImagenClient(project_id="proj", location="us-central1", model="imagen-x", session=http)

        result = client.generate_images("a rooftop", aspect_ratio="16:9", num_images=1)

        assert result.images == [b"png-bytes"]
        assert result == ImageResult(prompt="a rooftop", images=[b"png-bytes"])
        url = http.post.call_args.args[0]
        assert url == (
            "https://us-central1-aiplatform.googleapis.com/v1/projects/proj/"
            "locations/us-central1/publishers/google/models/imagen-x:predict"
        )
        body = http.post.call_args.kwargs["json"]
        assert body["instances"] == [{"prompt": "a rooftop"}]
        assert body["parameters"] == {"sampleCount": 1, "aspectRatio": "16:9"}
        assert http.post.call_args.kwargs["headers"]["Authorization"] == "Bearer test-token"

    def test_error_body_reaches_classifier(self, http):
        http.post.return_value = _response(429, {
            "error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}
        })
        client = ImagenClient(project_id="proj", session=http)

        with pytest.raises(ProviderError) as excinfo:
            client.generate_images("a rooftop")

        assert excinfo.value.status_code == 429
        assert classify_error(excinfo.value).is_quota_error is True

    def test_filtered_response_is_an_error(self, http):
        http.post.return_value = _response(payload={"predictions": []})
        client = ImagenClient(project_id="proj", session=http)
        with pytest.raises(ProviderError, match="No image data"):
            client.generate_images("a rooftop")


class TestVeoClient:

    def _client(self, http, storage_client=None):
        return VeoClient(
            project_id="proj",
            location="us-central1",
            output_bucket="gs://clips",
            model="veo-x",
            session=http,
            storage_client=storage_client,
        )

    def test_bucket_must_be_gcs(self, http):
        with pytest.raises(ValueError, match="gs://"):
            VeoClient(project_id="proj", output_bucket="clips", session=http)

    def test_submit(self, http):
        http.post.return_value = _response(payload={"name": "projects/proj/operations/123"})

        job = self._client(http).submit("slow zoom", b"png", "image/png")

        assert job == "projects/proj/operations/123"
        assert http.post.call_args.args[0].endswith("/models/veo-x:predictLongRunning")
        body = http.post.call_args.kwargs["json"]
        instance = body["instances"][0]
        assert instance["prompt"] == "slow zoom"
        assert instance["image"] == {
            "bytesBase64Encoded": base64.b64encode(b"png").decode(),
            "mimeType": "image/png",
        }
        assert body["parameters"]["storageUri"] == "gs://clips/"

    def test_check_running(self, http):
        http.post.return_value = _response(payload={"name": "op", "done": False})
        status = self._client(http).check("op")
        assert status.done is False
        assert status.result_uri is None
        assert http.post.call_args.kwargs["json"] == {"operationName": "op"}

    def test_check_done(self, http):
        http.post.return_value = _response(payload={
            "name": "op",
            "done": True,
            "response": {"videos": [{"gcsUri": "gs://clips/op/sample_0.mp4", "mimeType": "video/mp4"}]},
        })
        status = self._client(http).check("op")
        assert status.done is True
        assert status.result_uri == "gs://clips/op/sample_0.mp4"

    def test_check_done_without_videos(self, http):
        http.post.return_value = _response(payload={"name": "op", "done": True, "response": {}})
        status = self._client(http).check("op")
        assert status.done is True
        assert status.result_uri is None

    def test_operation_quota_error_is_classified(self, http):
        http.post.return_value = _response(payload={
            "name": "op",
            "done": True,
            "error": {"code": 8, "message": "Resource exhausted"},
        })
        with pytest.raises(ProviderError) as excinfo:
            self._client(http).check("op")

        classified = classify_error(excinfo.value)
        assert classified.is_quota_error is True
        assert classified.message == "Failed: Resource exhausted"

    def test_download_from_gcs(self, http):
        storage_client = MagicMock()
        blob = storage_client.bucket.return_value.blob.return_value
        blob.download_as_bytes.return_value = b"mp4"

        data = self._client(http, storage_client).download("gs://clips/op/sample_0.mp4")

        assert data == b"mp4"
        storage_client.bucket.assert_called_once_with("clips")
        storage_client.bucket.return_value.blob.assert_called_once_with("op/sample_0.mp4")

    def test_download_https(self, http):
        http.get.return_value = _response(content=b"mp4")
        data = self._client(http).download("https://example.com/clip.mp4")
        assert data == b"mp4"
        assert http.get.call_args.kwargs["headers"] == {"Authorization": "Bearer test-token"}

    def test_invalid_gcs_uri(self, http):
        with pytest.raises(ValueError):
            self._client(http, MagicMock()).download("gs://clips")


class TestGenerationClient:

    def test_missing_configuration(self):
        settings = Config(google_cloud_project="", veo_output_bucket="")
        with pytest.raises(ValueError, match="GOOGLE_CLOUD_PROJECT, VEO_OUTPUT_BUCKET"):
            GenerationClient(settings=settings)

    def test_delegates_to_model_clients(self):
        imagen = MagicMock(project_id="proj", model="imagen-x")
        veo = MagicMock(model="veo-x")
        veo.submit.return_value = "op"
        client = GenerationClient(imagen=imagen, veo=veo)

        client.generate_image("prompt", "16:9", 1)
        imagen.generate_images.assert_called_once_with("prompt", aspect_ratio="16:9", num_images=1)
        assert client.submit_video_job("p", b"png", "image/png") == "op"
        client.query_video_job("op")
        veo.check.assert_called_once_with("op")
        client.fetch_video("gs://clips/x.mp4")
        veo.download.assert_called_once_with("gs://clips/x.mp4")
